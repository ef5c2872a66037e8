from .agent import Agent, AgentConfig, AgentResult, RunState, ToolExecution, SKIP_NOTICE
from .base import Choice, GenerationOptions, GenerationResult, LanguageModelService
from .confirmation import AutoApproveGate, ConfirmFunc, TerminalConfirmationGate
from .context import ConversationContext
from .exceptions import (
    ShellAgentError,
    ToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    ConfirmationError,
    AgentError,
    AgentStartError,
    LLMServiceError,
    ProviderNotFoundError,
    ConfigError,
)
from .messages import RenderedMessage
from .tools import (
    SafetyLevel,
    Tool,
    ToolInput,
    ToolOutput,
    ToolSchema,
    ToolCallRequest,
    ToolRegistry,
    BashTool,
    FileReadTool,
    FileWriteTool,
    default_registry,
)
from .logger import get_logger, setup_logging

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentResult",
    "RunState",
    "ToolExecution",
    "SKIP_NOTICE",
    "Choice",
    "GenerationOptions",
    "GenerationResult",
    "LanguageModelService",
    "AutoApproveGate",
    "ConfirmFunc",
    "TerminalConfirmationGate",
    "ConversationContext",
    "ShellAgentError",
    "ToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "ConfirmationError",
    "AgentError",
    "AgentStartError",
    "LLMServiceError",
    "ProviderNotFoundError",
    "ConfigError",
    "RenderedMessage",
    "SafetyLevel",
    "Tool",
    "ToolInput",
    "ToolOutput",
    "ToolSchema",
    "ToolCallRequest",
    "ToolRegistry",
    "BashTool",
    "FileReadTool",
    "FileWriteTool",
    "default_registry",
    "get_logger",
    "setup_logging",
]
