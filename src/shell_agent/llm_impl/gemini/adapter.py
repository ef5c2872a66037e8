"""Translate between the rendered wire format and Gemini content payloads."""

import json
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google.genai import types
from google.genai.types import GenerateContentResponse

from ...agent_core.base import Choice, GenerationResult, normalize_stop_reason
from ...agent_core.logger import get_logger
from ...agent_core.messages import RenderedMessage
from ...agent_core.tools.models import ToolCallRequest, ToolSchema
from .schema_sanitizer import sanitize

logger = get_logger(__name__)

# Gemini does not always return call ids; ids generated locally carry this
# prefix and are never sent back to the API.
SYNTHETIC_ID_PREFIX = "gemini-call-"


def synthesize_call_id() -> str:
    return f"{SYNTHETIC_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def _provider_id(call_id: str) -> Optional[str]:
    if not call_id or call_id.startswith(SYNTHETIC_ID_PREFIX):
        return None
    return call_id


def _decode_arguments(arguments: str) -> Dict[str, Any]:
    if not arguments:
        return {}
    try:
        decoded = json.loads(arguments)
    except json.JSONDecodeError:
        return {"input": arguments}
    if isinstance(decoded, dict):
        return decoded
    return {"input": decoded}


def to_gemini_contents(messages: Sequence[RenderedMessage]) -> Tuple[Optional[str], List[types.Content]]:
    """
    Converts rendered messages to Gemini contents.

    System messages are collected into the system instruction. Tool results
    are sent as ``function_response`` parts in a user turn; consecutive tool
    messages share one turn, matching the call batch they answer.

    Args:
        messages: The rendered conversation.

    Returns:
        The system instruction (or None) and the list of Gemini contents.
    """
    system_parts: List[str] = []
    contents: List[types.Content] = []
    call_names: Dict[str, str] = {}
    previous_role: Optional[str] = None

    for msg in messages:
        if msg.role == "system":
            if msg.text:
                system_parts.append(msg.text)
        elif msg.role == "user":
            contents.append(types.Content(role="user", parts=[types.Part(text=msg.text)]))
        elif msg.role == "assistant":
            parts: List[types.Part] = []
            if msg.text:
                parts.append(types.Part(text=msg.text))
            for call in msg.tool_calls:
                call_names[call.call_id] = call.name
                parts.append(
                    types.Part(
                        function_call=types.FunctionCall(
                            id=_provider_id(call.call_id),
                            name=call.name,
                            args=_decode_arguments(call.arguments),
                        )
                    )
                )
            if parts:
                contents.append(types.Content(role="model", parts=parts))
        elif msg.role == "tool":
            response_parts = [
                types.Part(
                    function_response=types.FunctionResponse(
                        id=_provider_id(result.tool_call_id),
                        name=result.name or call_names.get(result.tool_call_id, "unknown_tool"),
                        response={"result": result.content},
                    )
                )
                for result in msg.tool_results
            ]
            if previous_role == "tool" and contents and contents[-1].parts is not None:
                contents[-1].parts.extend(response_parts)
            else:
                contents.append(types.Content(role="user", parts=response_parts))
        previous_role = msg.role

    system_instruction = "\n\n".join(system_parts) or None
    return system_instruction, contents


def to_gemini_tool(tools: Sequence[ToolSchema]) -> Optional[types.Tool]:
    """
    Generates a ``types.Tool`` holding one function declaration per schema.

    Returns:
        The tool object, or None if no tools are given.
    """
    if not tools:
        return None

    declarations = []
    for tool in tools:
        if tool.parameters and tool.parameters.get("properties"):
            declarations.append(
                types.FunctionDeclaration(
                    name=tool.name,
                    description=tool.description,
                    parameters=sanitize(tool.parameters),  # type: ignore[arg-type]
                )
            )
        else:
            declarations.append(types.FunctionDeclaration(name=tool.name, description=tool.description))

    return types.Tool(function_declarations=declarations)


def parse_generate_content_response(
    response: GenerateContentResponse,
) -> GenerationResult[GenerateContentResponse]:
    """Extract text, function calls and finish reasons from a Gemini response.

    Thought parts are not part of the answer and are dropped.

    Args:
        response: The content response from Gemini.

    Returns:
        The normalized generation result, with the raw response attached.
    """
    choices: List[Choice] = []
    for candidate in response.candidates or []:
        parts = candidate.content.parts if candidate.content and candidate.content.parts else []

        text_chunks: List[str] = []
        tool_calls: List[ToolCallRequest] = []
        for part in parts:
            if part.function_call:
                function_call = part.function_call
                tool_calls.append(
                    ToolCallRequest(
                        name=function_call.name or "",
                        call_id=function_call.id or synthesize_call_id(),
                        arguments=json.dumps(function_call.args or {}),
                    )
                )
            elif part.text and not part.thought:
                text_chunks.append(part.text)

        choices.append(
            Choice(
                content="".join(text_chunks),
                tool_calls=tool_calls,
                stop_reason=normalize_stop_reason(candidate.finish_reason),
            )
        )

    if not choices:
        logger.debug("Gemini response contained no candidates.")
    return GenerationResult(choices=choices, raw=response)
