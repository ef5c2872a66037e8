"""Thread-safe registry of the tools available to the agent."""

import re
import threading
from typing import Dict, Iterable, List, Optional

from ..models import Tool, ToolSchema
from ..schema import SchemaValidator
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_TOOL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class ToolRegistry:
    """
    A central registry to manage and access all available tools.

    Maps tool names to :class:`Tool` instances. All access goes through an
    internal lock so one registry can be shared by concurrent agent runs.
    Registration is expected to be rare (usually once at startup), lookups
    frequent.
    """

    def __init__(self, tools: Optional[Iterable[Tool]] = None) -> None:
        """Initialize the ToolRegistry.

        Args:
            tools: Optional tools to register immediately.
        """
        self._lock = threading.RLock()
        self._tools: Dict[str, Tool] = {}
        for tool in tools or ():
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """
        Register a tool, replacing any tool already registered under the same name.

        Args:
            tool: The tool to register.

        Raises:
            ToolRegistrationError: If ``tool`` is not a Tool instance.
            ToolValidationError: If the tool name or parameter schema is invalid.
        """
        if not isinstance(tool, Tool):
            msg = f"Expected a Tool instance, got {type(tool).__name__}."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self._validate(tool)

        with self._lock:
            replaced = tool.name in self._tools
            self._tools[tool.name] = tool

        if replaced:
            logger.info(f"Replaced tool: '{tool.name}'")
        else:
            logger.info(f"Successfully registered tool: '{tool.name}'")

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        with self._lock:
            if tool_name not in self._tools:
                raise ToolNotFoundError(f"unknown tool: {tool_name}")
            del self._tools[tool_name]
        logger.info(f"Successfully unregistered tool: '{tool_name}'")

    def get(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool is registered under ``name``.
        """
        with self._lock:
            tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"unknown tool: {name}")
        return tool

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._tools

    def all(self) -> List[Tool]:
        """All registered tools, in registration order."""
        with self._lock:
            return list(self._tools.values())

    def names(self) -> List[str]:
        with self._lock:
            return list(self._tools.keys())

    def filter_by_names(self, names: Iterable[str]) -> List[Tool]:
        """Return the registered tools whose names appear in ``names``.

        Unknown names are ignored. The result keeps registration order.
        """
        wanted = set(names)
        with self._lock:
            return [tool for name, tool in self._tools.items() if name in wanted]

    def to_schemas(self, names: Optional[Iterable[str]] = None) -> List[ToolSchema]:
        """Build the tool schemas attached to a generation request.

        Args:
            names: Optional allow-list. When None, every registered tool is included.
        """
        tools = self.all() if names is None else self.filter_by_names(names)
        return [tool.to_schema() for tool in tools]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

    @staticmethod
    def _validate(tool: Tool) -> None:
        name = getattr(tool, "name", None)
        if not isinstance(name, str) or not _TOOL_NAME_PATTERN.match(name):
            msg = f"Invalid tool name {name!r}. Use 1-64 letters, digits, '_' or '-'."
            logger.error(msg)
            raise ToolValidationError(msg)

        if not getattr(tool, "description", None):
            msg = f"Tool '{name}' missing description. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)

        SchemaValidator.assert_object_schema(tool.parameters, name)
