"""Shell command execution tool."""

import asyncio
import os
import re
import signal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import SafetyLevel, Tool, ToolInput, ToolOutput
from ...logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
MAX_OUTPUT_LEN = 10_000
TRUNCATION_MARKER = "\n... (output truncated)"
NO_OUTPUT_MARKER = "(command completed with no output)"
STDERR_MARKER = "[stderr]"

DANGEROUS_PATTERN_WARNING = "Warning: This command matches a dangerous pattern. Please review carefully."

DANGEROUS_PATTERNS: List[re.Pattern] = [
    # Recursive delete of the filesystem root
    re.compile(r"\brm\s+(-[a-z]*r[a-z]*|--recursive)(\s+-[a-z]+)*\s+/(\*|\s|$)", re.IGNORECASE),
    re.compile(r"\brm\s+-[a-z]*r[a-z]*\s+\*", re.IGNORECASE),
    re.compile(r"\bsudo\s+rm\b", re.IGNORECASE),
    re.compile(r"\bmkfs(\.\w+)?\b", re.IGNORECASE),
    re.compile(r"\bdd\s+.*\bof=/dev/", re.IGNORECASE),
    re.compile(r">\s*/dev/sd[a-z]", re.IGNORECASE),
    re.compile(r"\bchmod\s+(-[a-z]+\s+)*0?777\b", re.IGNORECASE),
    re.compile(r"\b(curl|wget)\s+.*\|\s*(sudo\s+)?(ba|z)?sh\b", re.IGNORECASE),
    # Fork bomb
    re.compile(r":\(\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:"),
    # Windows drive format
    re.compile(r"\bformat\s+[a-z]:", re.IGNORECASE),
]


def check_dangerous_command(command: str) -> str:
    """Return a warning when ``command`` matches a known dangerous pattern, else an empty string."""
    for pattern in DANGEROUS_PATTERNS:
        if pattern.search(command):
            return DANGEROUS_PATTERN_WARNING
    return ""


def is_dangerous_command(command: str) -> bool:
    return check_dangerous_command(command) != ""


def get_dangerous_command_warning(command: str) -> str:
    """Advisory warning for a command, combining the pattern list with looser heuristics.

    The warning never blocks execution; it is shown to the human deciding
    whether the call may run.
    """
    warning = check_dangerous_command(command)
    if warning:
        return warning

    lower_cmd = command.lower()
    if "rm " in lower_cmd and " -r" in lower_cmd:
        return "Warning: Recursive delete operation detected."
    if "sudo " in lower_cmd:
        return "Warning: Command requires elevated privileges."
    if "> /" in lower_cmd or ">> /" in lower_cmd:
        return "Warning: Writing to system paths detected."
    return ""


class BashInput(BaseModel):
    command: str = Field(description="The shell command to execute")


class BashTool(Tool):
    """Runs a command through the platform shell with a timeout and an output cap."""

    name = "bash"
    description = (
        "Execute shell commands. Use this to run terminal commands and scripts. "
        "Input should be a JSON object with a 'command' field."
    )
    safety_level = SafetyLevel.DANGEROUS
    args_model = BashInput

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_output: int = MAX_OUTPUT_LEN) -> None:
        """
        Args:
            timeout: Seconds before the command is killed.
            max_output: Maximum number of characters returned.
        """
        self.timeout = timeout
        self.max_output = max_output

    @staticmethod
    def parse_command(tool_input: ToolInput) -> str:
        """Extract the command: the ``command`` field of a JSON object, else the raw text."""
        if tool_input.parsed is not None:
            command = tool_input.parsed.get("command")
            return command if isinstance(command, str) else ""
        return tool_input.raw

    def describe_call(self, tool_input: ToolInput) -> str:
        command = self.parse_command(tool_input)
        description = f"Execute {self.name} tool: {command}"
        warning = get_dangerous_command_warning(command)
        if warning:
            description += f"\n{warning}"
        return description

    async def execute(self, tool_input: ToolInput) -> ToolOutput:
        command = self.parse_command(tool_input)
        if not command.strip():
            return ToolOutput.fail("command cannot be empty")

        if is_dangerous_command(command):
            logger.warning(f"Running command matching a dangerous pattern: {command}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *self._shell_argv(command),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=tool_input.working_dir or None,
                start_new_session=os.name != "nt",
            )
        except OSError as e:
            logger.error(f"Failed to start command: {e}")
            return ToolOutput.fail(f"failed to start command: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.warning(f"Command timed out after {self.timeout:g}s: {command}")
            return ToolOutput.fail(f"command timed out after {self.timeout:g}s")
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        result = self._format_output(stdout, stderr)

        if proc.returncode != 0:
            error = f"exit status {proc.returncode}"
            logger.debug(f"Command exited with status {proc.returncode}: {command}")
            return ToolOutput.fail(error, partial=result)

        if not result:
            result = NO_OUTPUT_MARKER
        return ToolOutput.ok(result)

    def _format_output(self, stdout: Optional[bytes], stderr: Optional[bytes]) -> str:
        result = (stdout or b"").decode("utf-8", errors="replace")
        err_text = (stderr or b"").decode("utf-8", errors="replace")
        if err_text:
            if result:
                result += "\n"
            result += f"{STDERR_MARKER}\n{err_text}"

        if len(result) > self.max_output:
            result = result[: self.max_output] + TRUNCATION_MARKER
        return result

    @staticmethod
    def _shell_argv(command: str) -> List[str]:
        if os.name == "nt":
            return ["cmd", "/C", command]
        return ["sh", "-c", command]

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        # The shell may be gone while background children still hold the pipes.
        try:
            if os.name != "nt":
                os.killpg(proc.pid, signal.SIGKILL)
            elif proc.returncode is None:
                proc.kill()
        except (ProcessLookupError, PermissionError):
            pass
        await proc.wait()
