"""Wire format handed to language model services.

A rendered conversation is a list of ``RenderedMessage`` objects, each made
of typed parts. Service implementations translate these parts into their own
request payloads.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    """Plain text content."""

    type: Literal["text"] = "text"
    text: str


class ToolCallPart(BaseModel):
    """A tool invocation requested by the assistant."""

    type: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    arguments: str = ""


class ToolResultPart(BaseModel):
    """The result of a tool invocation, keyed by the originating call id."""

    type: Literal["tool_result"] = "tool_result"
    tool_call_id: str
    content: str
    name: Optional[str] = None


ContentPart = Annotated[Union[TextPart, ToolCallPart, ToolResultPart], Field(discriminator="type")]


class RenderedMessage(BaseModel):
    """One message in wire format.

    Attributes:
        role: One of ``system``, ``user``, ``assistant`` or ``tool``.
        parts: Ordered content parts.
    """

    role: Literal["system", "user", "assistant", "tool"]
    parts: List[ContentPart] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))

    @property
    def tool_calls(self) -> List[ToolCallPart]:
        """All tool call parts, in order."""
        return [part for part in self.parts if isinstance(part, ToolCallPart)]

    @property
    def tool_results(self) -> List[ToolResultPart]:
        """All tool result parts, in order."""
        return [part for part in self.parts if isinstance(part, ToolResultPart)]

    @classmethod
    def from_text(cls, role: Literal["system", "user", "assistant", "tool"], text: str) -> "RenderedMessage":
        """Build a message holding a single text part."""
        return cls(role=role, parts=[TextPart(text=text)])
