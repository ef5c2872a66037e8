"""Bounded conversation history for the agent loop."""

from typing import List, Optional, Sequence

from ..logger import get_logger
from ..messages.models import AssistantMessage, BaseMessage, ToolMessage, UserMessage
from ..messages.wire import RenderedMessage, TextPart, ToolCallPart, ToolResultPart
from ..tools.models.tool_call import ToolCallRequest

logger = get_logger(__name__)

DEFAULT_MAX_MESSAGES = 50


class ConversationContext:
    """
    Ordered message log with a fixed system prompt and a maximum window.

    Every append is followed by FIFO eviction: when the log grows past
    ``max_messages`` the oldest messages are dropped until it fits again.
    Eviction counts raw messages and is not aware of tool call / tool result
    pairing, so the retained window may start with a tool result whose
    assistant message has already been evicted.
    """

    def __init__(self, system_prompt: str = "", max_messages: int = DEFAULT_MAX_MESSAGES) -> None:
        """Initialize an empty context.

        Args:
            system_prompt: Prompt rendered before every conversation. Empty disables it.
            max_messages: Maximum number of retained messages, excluding the system prompt.

        Raises:
            ValueError: If ``max_messages`` is smaller than one.
        """
        if max_messages < 1:
            raise ValueError(f"max_messages must be at least 1, got {max_messages}")
        self.system_prompt = system_prompt
        self._max_messages = max_messages
        self._messages: List[BaseMessage] = []

    @property
    def max_messages(self) -> int:
        return self._max_messages

    @property
    def messages(self) -> List[BaseMessage]:
        """A shallow copy of the retained messages, oldest first."""
        return list(self._messages)

    def add_user_message(self, content: str) -> None:
        self._append(UserMessage(content=content))

    def add_assistant_message(self, content: str) -> None:
        self._append(AssistantMessage(content=content))

    def add_assistant_message_with_tool_calls(self, content: str, tool_calls: Sequence[ToolCallRequest]) -> None:
        """Record an assistant turn that requested one or more tool calls.

        Args:
            content: Text that accompanied the calls, possibly empty.
            tool_calls: The requested calls in the order the service returned them.
        """
        self._append(AssistantMessage(content=content, tool_calls=list(tool_calls)))

    def add_tool_result(self, tool_call_id: str, content: str, name: Optional[str] = None) -> None:
        """Record the text produced for a tool call.

        Args:
            tool_call_id: Identifier of the call this result answers.
            content: Text fed back to the model.
            name: Optional tool name, needed by services that key results by name.
        """
        self._append(ToolMessage(content=content, tool_call_id=tool_call_id, name=name))

    def render(self) -> List[RenderedMessage]:
        """Render the context into the wire format expected by language model services.

        Returns:
            The system prompt (when non-empty) followed by every retained message.
        """
        rendered: List[RenderedMessage] = []
        if self.system_prompt:
            rendered.append(RenderedMessage.from_text("system", self.system_prompt))

        for msg in self._messages:
            if isinstance(msg, UserMessage):
                rendered.append(RenderedMessage.from_text("user", msg.content))
            elif isinstance(msg, AssistantMessage):
                if msg.tool_calls:
                    parts: list = []
                    if msg.content:
                        parts.append(TextPart(text=msg.content))
                    for call in msg.tool_calls:
                        parts.append(ToolCallPart(call_id=call.call_id, name=call.name, arguments=call.arguments))
                    rendered.append(RenderedMessage(role="assistant", parts=parts))
                else:
                    rendered.append(RenderedMessage.from_text("assistant", msg.content))
            elif isinstance(msg, ToolMessage):
                rendered.append(
                    RenderedMessage(
                        role="tool",
                        parts=[ToolResultPart(tool_call_id=msg.tool_call_id, content=msg.content, name=msg.name)],
                    )
                )
        return rendered

    def clear(self) -> None:
        """Drop all messages, keeping the system prompt and the bound."""
        self._messages = []

    def last_message(self) -> Optional[BaseMessage]:
        if not self._messages:
            return None
        return self._messages[-1]

    def message_count(self) -> int:
        return len(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def _append(self, message: BaseMessage) -> None:
        self._messages.append(message)
        self._truncate()

    def _truncate(self) -> None:
        overflow = len(self._messages) - self._max_messages
        if overflow <= 0:
            return

        self._messages = self._messages[overflow:]
        logger.debug(f"Evicted {overflow} message(s) from context (max {self._max_messages}).")
        if isinstance(self._messages[0], ToolMessage):
            logger.warning(
                f"Context window now starts with an orphaned tool result "
                f"(tool_call_id={self._messages[0].tool_call_id})."
            )
