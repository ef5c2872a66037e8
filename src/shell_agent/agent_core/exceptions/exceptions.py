"""
Custom exception classes for the shell agent.

The hierarchy separates tool problems (registration, lookup, validation and
execution), confirmation gate failures, language model service failures and
configuration problems so callers can react to each family separately.
"""


class ShellAgentError(Exception):
    """Base exception for all shell agent errors."""

    pass


class ToolError(ShellAgentError):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(ToolError):
    """Raised when there is an error registering a tool."""

    pass


class ToolNotFoundError(ToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(ToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(ToolError):
    """Raised when tool parameters or definition are invalid."""

    pass


class ConfirmationError(ShellAgentError):
    """Raised when the confirmation gate cannot produce an answer."""

    pass


class AgentError(ShellAgentError):
    """Base exception for agent loop errors."""

    pass


class AgentStartError(AgentError):
    """Raised when an agent run cannot even start."""

    pass


class LLMServiceError(ShellAgentError):
    """Raised when a language model service rejects or fails a request."""

    pass


class ProviderNotFoundError(ShellAgentError):
    """Raised when no service factory is known for a provider name."""

    pass


class ConfigError(ShellAgentError):
    """Raised when the configuration file cannot be read or a value is invalid."""

    pass
