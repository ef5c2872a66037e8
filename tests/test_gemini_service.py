import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from shell_agent.agent_core import GenerationOptions, RenderedMessage, ToolSchema
from shell_agent.agent_core.messages import TextPart, ToolCallPart, ToolResultPart
from shell_agent.llm_impl.gemini import (
    GeminiService,
    parse_generate_content_response,
    to_gemini_contents,
    to_gemini_tool,
)
from shell_agent.llm_impl.gemini.adapter import SYNTHETIC_ID_PREFIX


@pytest.fixture
def mock_genai_client() -> Any:
    client = MagicMock()
    client.models = MagicMock()
    client.models.generate_content = AsyncMock()
    return client


def make_response(*parts: types.Part, finish_reason: types.FinishReason = types.FinishReason.STOP) -> Any:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)), finish_reason=finish_reason)]
    )


def test_to_gemini_contents() -> None:
    messages = [
        RenderedMessage.from_text("system", "be brief"),
        RenderedMessage.from_text("user", "list files"),
        RenderedMessage(
            role="assistant",
            parts=[
                TextPart(text="Checking."),
                ToolCallPart(call_id="real-id", name="bash", arguments='{"command": "ls"}'),
                ToolCallPart(call_id=f"{SYNTHETIC_ID_PREFIX}abc", name="file_read", arguments="not json"),
            ],
        ),
        RenderedMessage(role="tool", parts=[ToolResultPart(tool_call_id="real-id", content="a.txt")]),
        RenderedMessage(
            role="tool", parts=[ToolResultPart(tool_call_id=f"{SYNTHETIC_ID_PREFIX}abc", content="x", name="file_read")]
        ),
    ]

    system_instruction, contents = to_gemini_contents(messages)

    assert system_instruction == "be brief"
    assert [c.role for c in contents] == ["user", "model", "user"]

    model_parts = contents[1].parts
    assert model_parts[0].text == "Checking."
    assert model_parts[1].function_call.id == "real-id"
    assert model_parts[1].function_call.args == {"command": "ls"}
    # Locally generated ids are not sent back.
    assert model_parts[2].function_call.id is None
    assert model_parts[2].function_call.args == {"input": "not json"}

    # Consecutive tool results share one turn.
    responses = [p.function_response for p in contents[2].parts]
    assert len(responses) == 2
    assert responses[0].name == "bash"
    assert responses[0].response == {"result": "a.txt"}
    assert responses[1].id is None


def test_to_gemini_tool_sanitizes_parameters() -> None:
    schema = ToolSchema(
        name="bash",
        description="Run a command",
        parameters={
            "type": "object",
            "title": "BashInput",
            "additionalProperties": False,
            "properties": {"command": {"type": "string"}},
            "required": ["command"],
        },
    )
    empty = ToolSchema(name="noop", description="Does nothing")

    tool = to_gemini_tool([schema, empty])

    assert tool is not None
    bash, noop = tool.function_declarations
    assert bash.name == "bash"
    assert bash.parameters.required == ["command"]
    assert noop.parameters is None
    assert to_gemini_tool([]) is None


def test_parse_response_with_function_call_and_thought() -> None:
    response = make_response(
        types.Part(text="thinking...", thought=True),
        types.Part(text="Let me look."),
        types.Part(function_call=types.FunctionCall(name="bash", args={"command": "ls"})),
    )

    result = parse_generate_content_response(response)

    choice = result.choices[0]
    assert choice.content == "Let me look."
    assert choice.stop_reason == "stop"
    call = choice.tool_calls[0]
    assert call.name == "bash"
    assert call.call_id.startswith(SYNTHETIC_ID_PREFIX)
    assert json.loads(call.arguments) == {"command": "ls"}


def test_parse_response_without_candidates() -> None:
    result = parse_generate_content_response(types.GenerateContentResponse(candidates=[]))

    assert result.choices == []


@pytest.mark.asyncio
async def test_generate(mock_genai_client: Any) -> None:
    mock_genai_client.models.generate_content.return_value = make_response(types.Part(text="ls -la"))
    service = GeminiService(aclient=mock_genai_client, model_name="gemini-2.0-flash", temp=0.5)
    bash = ToolSchema(name="bash", description="Run", parameters={"type": "object", "properties": {"command": {"type": "string"}}})

    result = await service.generate(
        [RenderedMessage.from_text("system", "sys"), RenderedMessage.from_text("user", "list files")],
        [bash],
        GenerationOptions(max_tokens=100),
    )

    assert result.choices[0].content == "ls -la"
    kwargs = mock_genai_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.0-flash"
    config = kwargs["config"]
    assert config.system_instruction == "sys"
    assert config.temperature == 0.5
    assert config.max_output_tokens == 100
    assert config.automatic_function_calling.disable is True
    assert config.tools[0].function_declarations[0].name == "bash"
    assert len(kwargs["contents"]) == 1
