"""Data models describing agent configuration, tool executions and run results."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..context import DEFAULT_MAX_MESSAGES

SKIP_NOTICE = "Tool execution was skipped by user."
NO_RESPONSE_ERROR = "no response from LLM"
MAX_ITERATIONS_ERROR = "max iterations reached"


class RunState(str, Enum):
    """States of the agent loop. SUCCEEDED and FAILED are terminal."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AgentConfig(BaseModel):
    """
    Agent configuration.

    Attributes:
        auto_approve: Skip the confirmation gate for every tool.
        max_iterations: Upper bound on language model calls per run.
        temperature: Sampling temperature passed to the service.
        max_tokens: Optional cap on generated tokens per call.
        allowed_tools: Optional allow-list narrowing the tools offered to the model.
        working_dir: Directory tools resolve relative paths and run commands in.
        max_context_messages: Window size of a context created by the agent.
    """

    auto_approve: bool = False
    max_iterations: int = Field(default=10, ge=1)
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    allowed_tools: Optional[List[str]] = None
    working_dir: Optional[str] = None
    max_context_messages: int = Field(default=DEFAULT_MAX_MESSAGES, ge=1)


class ToolExecution(BaseModel):
    """
    Record of one tool call. Never mutated after creation.

    Attributes:
        tool_name: Name the model asked for.
        call_id: Identifier of the originating tool call.
        input: Raw argument text.
        output: Tool output, or partial output when the tool failed.
        error: Error text when lookup, confirmation or execution failed.
        approved: Whether the call was allowed to run.
        skipped: Whether the confirmation gate denied the call.
        duration: Wall-clock seconds spent, including confirmation.
    """

    model_config = ConfigDict(frozen=True)

    tool_name: str
    call_id: str = ""
    input: str = ""
    output: str = ""
    error: Optional[str] = None
    approved: bool = False
    skipped: bool = False
    duration: float = 0.0

    def feedback_text(self) -> str:
        """Text fed back into the conversation for this call."""
        if self.error:
            text = f"Error: {self.error}"
            if self.output:
                text += f"\n{self.output}"
            return text
        if self.skipped:
            return SKIP_NOTICE
        return self.output


class AgentResult(BaseModel):
    """
    Outcome of one agent run.

    Attributes:
        final_answer: The model's final text, possibly empty.
        tools_used: Every tool execution, in order.
        iterations: Number of language model calls made.
        success: Whether the run reached SUCCEEDED.
        error: Terminal error for failed runs.
        state: Terminal state of the run.
    """

    final_answer: str = ""
    tools_used: List[ToolExecution] = Field(default_factory=list)
    iterations: int = 0
    success: bool = False
    error: Optional[str] = None
    state: RunState = RunState.RUNNING
