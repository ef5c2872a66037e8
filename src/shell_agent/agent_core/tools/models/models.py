"""Core tool abstractions: the Tool base class and its input/output models."""

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type

from pydantic import BaseModel, Field

from ..schema import SchemaValidator


class SafetyLevel(str, Enum):
    """Classification of a tool's side effects.

    SAFE tools are read-only, MODERATE tools modify files, DANGEROUS tools run
    arbitrary commands.
    """

    SAFE = "safe"
    MODERATE = "moderate"
    DANGEROUS = "dangerous"


class ToolSchema(BaseModel):
    """
    Provider-agnostic description of a tool, as attached to a generation request.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        parameters: JSON schema of the tool's arguments.
    """

    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


class ToolInput(BaseModel):
    """
    Input handed to a tool.

    Attributes:
        raw: The raw argument text supplied by the language model.
        parsed: The decoded JSON object, or None when ``raw`` is not a JSON object.
        working_dir: Directory relative paths and subprocesses resolve against.
    """

    raw: str = ""
    parsed: Optional[Dict[str, Any]] = None
    working_dir: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Optional[str], working_dir: Optional[str] = None) -> "ToolInput":
        """Build an input from raw argument text, decoding it when it is a JSON object.

        Args:
            raw: Raw argument text; None is treated as empty.
            working_dir: Optional working directory.

        Returns:
            The tool input. Decoding failures are not errors; ``parsed`` stays None.
        """
        raw = raw or ""
        parsed: Optional[Dict[str, Any]] = None
        if raw.strip():
            try:
                decoded = json.loads(raw)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, dict):
                parsed = decoded
        return cls(raw=raw, parsed=parsed, working_dir=working_dir)


class ToolOutput(BaseModel):
    """
    Outcome of a tool execution.

    Attributes:
        success: Whether the tool did what was asked.
        result: Output text. On failure this may hold partial output.
        error: Error description when ``success`` is False.
    """

    success: bool
    result: str = ""
    error: str = ""

    @classmethod
    def ok(cls, result: str) -> "ToolOutput":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str, partial: str = "") -> "ToolOutput":
        return cls(success=False, result=partial, error=error)


class Tool(ABC):
    """
    A named capability the agent can invoke.

    Subclasses set ``name``, ``description`` and ``safety_level`` and implement
    :meth:`execute`. The parameter schema is derived from ``args_model`` unless
    :attr:`parameters` is overridden. Tools hold fixed configuration only.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    safety_level: ClassVar[SafetyLevel] = SafetyLevel.SAFE
    args_model: ClassVar[Optional[Type[BaseModel]]] = None

    @property
    def parameters(self) -> Dict[str, Any]:
        """JSON schema describing the expected arguments."""
        if self.args_model is None:
            return {"type": "object", "properties": {}}
        return SchemaValidator.build_parameters_schema(self.args_model)

    @property
    def requires_confirmation(self) -> bool:
        """Whether a human has to approve each call. Defaults to any non-safe level."""
        return self.safety_level is not SafetyLevel.SAFE

    @abstractmethod
    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        """Run the tool.

        Expected failures are reported as ``ToolOutput.fail``. Raising is
        reserved for unexpected faults.
        """
        ...

    def describe_call(self, tool_input: ToolInput) -> str:
        """Human-readable description of a call, shown by the confirmation gate."""
        return f"Execute {self.name} tool"

    def to_schema(self) -> ToolSchema:
        return ToolSchema(name=self.name, description=self.description, parameters=self.parameters)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, safety_level={self.safety_level.value!r})"
