"""The agent loop and its result models."""

from .loop import Agent
from .models import (
    AgentConfig,
    AgentResult,
    MAX_ITERATIONS_ERROR,
    NO_RESPONSE_ERROR,
    RunState,
    SKIP_NOTICE,
    ToolExecution,
)

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentResult",
    "MAX_ITERATIONS_ERROR",
    "NO_RESPONSE_ERROR",
    "RunState",
    "SKIP_NOTICE",
    "ToolExecution",
]
