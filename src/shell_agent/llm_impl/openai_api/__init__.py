"""OpenAI and OpenAI-compatible language model service."""

from .core import OpenAIService
from .adapter import parse_chat_completion, to_openai_messages, to_openai_tools

__all__ = ["OpenAIService", "parse_chat_completion", "to_openai_messages", "to_openai_tools"]
