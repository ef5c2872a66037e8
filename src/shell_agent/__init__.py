"""Shell Agent - a terminal assistant that drives a language model through a bounded tool-calling loop."""

from .agent_core import (
    Agent,
    AgentConfig,
    AgentResult,
    AutoApproveGate,
    ConversationContext,
    LanguageModelService,
    SafetyLevel,
    TerminalConfirmationGate,
    Tool,
    ToolInput,
    ToolOutput,
    ToolRegistry,
    default_registry,
)
from .llm_impl import GeminiService, OpenAIService, ServiceFactory, default_service_factory

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentResult",
    "AutoApproveGate",
    "ConversationContext",
    "LanguageModelService",
    "SafetyLevel",
    "TerminalConfirmationGate",
    "Tool",
    "ToolInput",
    "ToolOutput",
    "ToolRegistry",
    "default_registry",
    "GeminiService",
    "OpenAIService",
    "ServiceFactory",
    "default_service_factory",
]
