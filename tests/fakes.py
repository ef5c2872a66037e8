"""Scripted stand-ins for language model services and tools used across the test suite."""

from typing import Any, Dict, List, Optional, Sequence, Union

from shell_agent.agent_core import (
    Choice,
    GenerationOptions,
    GenerationResult,
    LanguageModelService,
    RenderedMessage,
    SafetyLevel,
    Tool,
    ToolCallRequest,
    ToolInput,
    ToolOutput,
    ToolSchema,
)

Scripted = Union[GenerationResult, BaseException]


def text_response(text: str, stop_reason: Optional[str] = "stop") -> GenerationResult:
    return GenerationResult(choices=[Choice(content=text, stop_reason=stop_reason)])


def tool_call_response(*calls: ToolCallRequest, content: str = "") -> GenerationResult:
    return GenerationResult(choices=[Choice(content=content, tool_calls=list(calls), stop_reason="tool_calls")])


class FakeService(LanguageModelService[None]):
    """Returns queued responses in order; exceptions in the queue are raised."""

    def __init__(self, responses: Sequence[Scripted] = (), repeat_last: bool = False) -> None:
        super().__init__(max_retries=0, base_retry_delay=0.0)
        self.responses: List[Scripted] = list(responses)
        self.repeat_last = repeat_last
        self.calls: List[Dict[str, Any]] = []

    async def _generate_impl(
        self,
        messages: List[RenderedMessage],
        tools: List[ToolSchema],
        options: GenerationOptions,
    ) -> GenerationResult[None]:
        self.calls.append({"messages": messages, "tools": tools, "options": options})
        if not self.responses:
            raise AssertionError("FakeService ran out of scripted responses")
        if self.repeat_last and len(self.responses) == 1:
            response = self.responses[0]
        else:
            response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class RecordingTool(Tool):
    """Tool returning a fixed output and remembering every input."""

    name = "recorder"
    description = "Records its input."

    def __init__(
        self,
        output: Optional[ToolOutput] = None,
        safety_level: SafetyLevel = SafetyLevel.SAFE,
        raises: Optional[BaseException] = None,
    ) -> None:
        self.output = output or ToolOutput.ok("recorded")
        self.safety_level = safety_level  # type: ignore[misc]
        self.raises = raises
        self.inputs: List[ToolInput] = []

    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        self.inputs.append(tool_input)
        if self.raises is not None:
            raise self.raises
        return self.output
