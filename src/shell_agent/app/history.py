"""Append-only history of prompts and generated commands."""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..agent_core.logger import get_logger

logger = get_logger(__name__)

HISTORY_FILE_NAME = ".shell_agent_history.txt"
ENTRY_SEPARATOR = "---"


@dataclass
class HistoryEntry:
    time: Optional[datetime]
    shell: str = ""
    prompt: str = ""
    output: str = ""

    def format(self) -> str:
        stamp = (self.time or datetime.now(timezone.utc)).isoformat(timespec="seconds")
        return f"Time: {stamp}\nShell: {self.shell}\nPrompt: {self.prompt}\nOutput: {self.output}\n{ENTRY_SEPARATOR}\n"


def history_path() -> Path:
    try:
        return Path.home() / HISTORY_FILE_NAME
    except RuntimeError:
        return Path(".") / HISTORY_FILE_NAME


class History:
    """
    History file access.

    Entries are blocks of ``Time``/``Shell``/``Prompt``/``Output`` lines
    terminated by ``---``. Write failures are logged and never raised.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path else history_path()

    def log(self, shell: str, prompt: str, output: str) -> None:
        self.log_entry(HistoryEntry(time=datetime.now(timezone.utc), shell=shell, prompt=prompt, output=output))

    def log_entry(self, entry: HistoryEntry) -> None:
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
            with os.fdopen(fd, "a", encoding="utf-8") as f:
                f.write(entry.format())
        except OSError as e:
            logger.warning(f"Failed to write history: {e}")

    def load_last_entry(self) -> Tuple[str, str]:
        """Return ``(prompt, shell)`` of the last entry, or empty strings without history."""
        entries = self.load_recent_entries(1)
        if not entries:
            return "", ""
        return entries[-1].prompt, entries[-1].shell

    def load_recent_entries(self, n: int) -> List[HistoryEntry]:
        """Return up to ``n`` most recent complete entries, oldest first."""
        try:
            with open(self.path, encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()
        except OSError:
            return []

        entries: List[HistoryEntry] = []
        current: Optional[HistoryEntry] = None
        for line in lines:
            if line.startswith("Time: "):
                if current is not None:
                    entries.append(current)
                current = HistoryEntry(time=_parse_time(line[len("Time: "):]))
            elif current is None:
                continue
            elif line.startswith("Shell: "):
                current.shell = line[len("Shell: "):]
            elif line.startswith("Prompt: "):
                current.prompt = line[len("Prompt: "):]
            elif line.startswith("Output: "):
                current.output = line[len("Output: "):]
            elif line == ENTRY_SEPARATOR:
                entries.append(current)
                current = None

        if n <= 0:
            return []
        return entries[-n:]

    def clear(self) -> None:
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            os.close(fd)
        except OSError as e:
            logger.warning(f"Failed to clear history: {e}")


def _parse_time(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None
