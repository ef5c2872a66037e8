"""Conversation context management."""

from .conversation import ConversationContext, DEFAULT_MAX_MESSAGES

__all__ = ["ConversationContext", "DEFAULT_MAX_MESSAGES"]
