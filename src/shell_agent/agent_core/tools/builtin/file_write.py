"""File writing tool."""

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ._paths import resolve_tool_path
from ..models import SafetyLevel, Tool, ToolInput, ToolOutput
from ...exceptions import ToolExecutionError
from ...logger import get_logger

logger = get_logger(__name__)


class FileWriteInput(BaseModel):
    path: str = Field(description="The path to the file to write")
    content: str = Field(description="The content to write to the file")
    append: bool = Field(default=False, description="If true, append to the file instead of overwriting")


def describe_write(args: FileWriteInput) -> str:
    """Human-readable summary of a write operation."""
    action = "Append" if args.append else "Write"
    return f"{action} {len(args.content.encode('utf-8'))} bytes to {args.path}"


class FileWriteTool(Tool):
    """Writes or appends text to a file, creating parent directories as needed."""

    name = "file_write"
    description = (
        "Write content to a file. Input should be a JSON object with 'path' and 'content' fields. "
        "Optionally set 'append' to true to append instead of overwrite."
    )
    safety_level = SafetyLevel.MODERATE
    args_model = FileWriteInput

    def describe_call(self, tool_input: ToolInput) -> str:
        if tool_input.parsed is None:
            return super().describe_call(tool_input)
        try:
            return describe_write(FileWriteInput.model_validate(tool_input.parsed))
        except ValidationError:
            return super().describe_call(tool_input)

    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        if tool_input.parsed is None:
            return ToolOutput.fail("invalid input: expected a JSON object with 'path' and 'content' fields")

        try:
            args = FileWriteInput.model_validate(tool_input.parsed)
        except ValidationError as e:
            fields = ", ".join(".".join(str(loc) for loc in err["loc"]) or "input" for err in e.errors())
            return ToolOutput.fail(f"invalid input: missing or malformed field(s): {fields}")

        if not args.path.strip():
            return ToolOutput.fail("path cannot be empty")

        try:
            resolved = resolve_tool_path(args.path.strip(), tool_input.working_dir)
        except ToolExecutionError as e:
            logger.warning(f"Rejected write to '{args.path}': {e}")
            return ToolOutput.fail(str(e))

        return await asyncio.to_thread(self._write, resolved, args)

    @staticmethod
    def _write(resolved: Path, args: FileWriteInput) -> ToolOutput:
        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return ToolOutput.fail(f"failed to create directory: {e.strerror or e}")

        if resolved.is_dir():
            return ToolOutput.fail(f"{args.path} is a directory, not a file")

        existed = resolved.exists()
        mode = "a" if args.append else "w"
        try:
            with open(resolved, mode, encoding="utf-8", newline="") as fh:
                fh.write(args.content)
        except OSError as e:
            return ToolOutput.fail(f"cannot write {args.path}: {e.strerror or e}")

        action = "created"
        if existed:
            action = "appended to" if args.append else "overwrote"

        written = len(args.content.encode("utf-8"))
        logger.info(f"File {action}: {resolved} ({written} bytes)")
        return ToolOutput.ok(f"Successfully {action} file: {args.path} ({written} bytes)")
