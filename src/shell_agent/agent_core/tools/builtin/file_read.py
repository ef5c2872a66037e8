"""File reading tool."""

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field

from ._paths import resolve_tool_path
from ..models import SafetyLevel, Tool, ToolInput, ToolOutput
from ...exceptions import ToolExecutionError
from ...logger import get_logger

logger = get_logger(__name__)

MAX_FILE_SIZE = 100 * 1024
MAX_LINE_COUNT = 1000
LINE_TRUNCATION_MARKER = "... (truncated)"


class FileReadInput(BaseModel):
    path: str = Field(description="The path to the file to read")


class FileReadTool(Tool):
    """Reads a text file, bounded by a size cap and a line cap."""

    name = "file_read"
    description = (
        "Read the contents of a file. Input should be a JSON object with a 'path' field containing the file path."
    )
    safety_level = SafetyLevel.SAFE
    args_model = FileReadInput

    def __init__(self, max_file_size: int = MAX_FILE_SIZE, max_lines: int = MAX_LINE_COUNT) -> None:
        self.max_file_size = max_file_size
        self.max_lines = max_lines

    @staticmethod
    def parse_path(tool_input: ToolInput) -> str:
        """Extract the path: the ``path`` field of a JSON object, else the trimmed raw text."""
        if tool_input.parsed is not None:
            path = tool_input.parsed.get("path")
            return path.strip() if isinstance(path, str) else ""
        return tool_input.raw.strip()

    def describe_call(self, tool_input: ToolInput) -> str:
        return f"Read file {self.parse_path(tool_input)}"

    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        path = self.parse_path(tool_input)
        if not path:
            return ToolOutput.fail("path cannot be empty")

        try:
            resolved = resolve_tool_path(path, tool_input.working_dir)
        except ToolExecutionError as e:
            logger.warning(f"Rejected read of '{path}': {e}")
            return ToolOutput.fail(str(e))

        return await asyncio.to_thread(self._read, resolved, path)

    def _read(self, resolved: Path, display_path: str) -> ToolOutput:
        try:
            info = resolved.stat()
        except FileNotFoundError:
            return ToolOutput.fail(f"file not found: {display_path}")
        except OSError as e:
            return ToolOutput.fail(f"cannot access {display_path}: {e.strerror or e}")

        if resolved.is_dir():
            return ToolOutput.fail(f"{display_path} is a directory, not a file")

        if info.st_size > self.max_file_size:
            return ToolOutput.fail(f"file too large ({info.st_size} bytes, max {self.max_file_size} bytes)")

        try:
            content = resolved.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            return ToolOutput.fail(f"cannot read {display_path}: {e.strerror or e}")

        lines = content.splitlines(keepends=True)
        if len(lines) > self.max_lines:
            content = "".join(lines[: self.max_lines])
            if not content.endswith("\n"):
                content += "\n"
            content += LINE_TRUNCATION_MARKER
            logger.debug(f"Truncated '{display_path}' to {self.max_lines} of {len(lines)} lines.")

        return ToolOutput.ok(content)
