"""Export the exception hierarchy used across tools, the agent loop and services."""

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

__all__ = [
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
]
