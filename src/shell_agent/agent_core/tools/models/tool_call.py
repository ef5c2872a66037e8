"""Data models for tool call requests."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolCallRequest:
    """Represents a normalized tool call request from a language model response.

    Attributes:
        name: Name of the requested tool.
        call_id: Stable identifier linking the call to its tool result.
        arguments: Raw argument payload, usually a JSON object encoded as text.
    """

    name: str
    call_id: str
    arguments: str = ""
