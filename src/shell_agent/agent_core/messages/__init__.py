"""Expose provider-agnostic message models and the rendered wire format."""

from .models import BaseMessage, UserMessage, AssistantMessage, ToolMessage
from .wire import ContentPart, RenderedMessage, TextPart, ToolCallPart, ToolResultPart

__all__ = [
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolMessage",
    "ContentPart",
    "RenderedMessage",
    "TextPart",
    "ToolCallPart",
    "ToolResultPart",
]
