"""Translate between the rendered wire format and OpenAI chat completion payloads."""

from typing import Any, Dict, List, Sequence

from openai.types.chat import ChatCompletion, ChatCompletionToolParam

from ...agent_core.base import Choice, GenerationResult, normalize_stop_reason
from ...agent_core.messages import RenderedMessage
from ...agent_core.tools.models import ToolCallRequest, ToolSchema


def to_openai_messages(messages: Sequence[RenderedMessage]) -> List[Dict[str, Any]]:
    """
    Converts rendered messages to OpenAI chat message dictionaries.

    Assistant turns carrying tool calls become ``tool_calls`` entries; every
    tool result becomes its own ``tool`` message keyed by the call id.

    Args:
        messages: The rendered conversation.

    Returns:
        List of OpenAI message dictionaries.
    """
    openai_messages: List[Dict[str, Any]] = []
    for msg in messages:
        if msg.role == "tool":
            for result in msg.tool_results:
                openai_messages.append(
                    {"role": "tool", "tool_call_id": result.tool_call_id, "content": result.content}
                )
        elif msg.role == "assistant" and msg.tool_calls:
            openai_messages.append(
                {
                    "role": "assistant",
                    # OpenAI expects null content on pure tool-call turns.
                    "content": msg.text or None,
                    "tool_calls": [
                        {
                            "id": call.call_id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": call.arguments or "{}"},
                        }
                        for call in msg.tool_calls
                    ],
                }
            )
        else:
            openai_messages.append({"role": msg.role, "content": msg.text})
    return openai_messages


def to_openai_tools(tools: Sequence[ToolSchema]) -> List[ChatCompletionToolParam]:
    """
    Generates tool definitions suitable for the OpenAI API.

    Args:
        tools: Tool schemas offered to the model.

    Returns:
        A list of tool dictionaries.
    """
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters or {"type": "object", "properties": {}},
            },
        }
        for tool in tools
    ]


def parse_chat_completion(response: ChatCompletion) -> GenerationResult[ChatCompletion]:
    """Extract text, tool calls and stop reasons from a chat completion.

    Args:
        response: The chat completion response from OpenAI.

    Returns:
        The normalized generation result, with the raw response attached.
    """
    choices: List[Choice] = []
    for choice in response.choices or []:
        message = choice.message
        tool_calls = [
            ToolCallRequest(
                name=tool_call.function.name,
                call_id=tool_call.id,
                arguments=tool_call.function.arguments or "",
            )
            for tool_call in (message.tool_calls or [])
            # Only function tool calls map onto tools.
            if tool_call.type == "function"
        ]
        choices.append(
            Choice(
                content=message.content or "",
                tool_calls=tool_calls,
                stop_reason=normalize_stop_reason(choice.finish_reason),
            )
        )
    return GenerationResult(choices=choices, raw=response)
