"""Built-in tools: shell execution, file reading and file writing."""

from typing import Iterable, Optional

from .bash import (
    BashInput,
    BashTool,
    DANGEROUS_PATTERNS,
    check_dangerous_command,
    get_dangerous_command_warning,
    is_dangerous_command,
)
from .file_read import FileReadInput, FileReadTool
from .file_write import FileWriteInput, FileWriteTool, describe_write
from ..registry import ToolRegistry

BUILTIN_TOOL_NAMES = ("bash", "file_read", "file_write")


def default_registry(bash_timeout: Optional[float] = None, enabled: Optional[Iterable[str]] = None) -> ToolRegistry:
    """Create a registry holding the built-in tools.

    Args:
        bash_timeout: Optional timeout override for the bash tool, in seconds.
        enabled: Optional subset of built-in tool names to register.

    Returns:
        A new registry.
    """
    bash = BashTool() if bash_timeout is None else BashTool(timeout=bash_timeout)
    tools = [bash, FileReadTool(), FileWriteTool()]
    if enabled is not None:
        wanted = set(enabled)
        tools = [tool for tool in tools if tool.name in wanted]
    return ToolRegistry(tools)


__all__ = [
    "BashInput",
    "BashTool",
    "DANGEROUS_PATTERNS",
    "check_dangerous_command",
    "get_dangerous_command_warning",
    "is_dangerous_command",
    "FileReadInput",
    "FileReadTool",
    "FileWriteInput",
    "FileWriteTool",
    "describe_write",
    "BUILTIN_TOOL_NAMES",
    "default_registry",
]
