"""Provider-agnostic message models for the conversation context."""

from abc import ABC
from typing import List, Optional

from pydantic import BaseModel, Field

from ..tools.models.tool_call import ToolCallRequest


class BaseMessage(ABC, BaseModel):
    """Base model for messages exchanged with a language model.

    Attributes:
        role: Role associated with the message.
        content: Text payload of the message. May be empty for assistant
            messages that only carry tool calls.
    """

    role: str
    content: str = ""


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    role: str = "user"


class AssistantMessage(BaseMessage):
    """Message authored by the assistant, optionally containing tool calls."""

    role: str = "assistant"
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)


class ToolMessage(BaseMessage):
    """Result of a tool invocation, linked to the call that produced it."""

    role: str = "tool"
    tool_call_id: str
    name: Optional[str] = None
