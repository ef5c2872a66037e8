"""Prompt construction for single-command mode and agent mode."""

import os
import re
from typing import List

from ..agent_core.logger import get_logger

logger = get_logger(__name__)

BYTES_PER_TOKEN = 4

PROMPT_TEMPLATE = """<instruction>
You are a autocorrect system for a terminal, your environment is {shell}. When presented an input you fix and/or change it into a compatible {shell} command that can be executed.
</instruction>
{context}<user_input>
{query}
</user_input>
<output>
Only output a command that can be immediately executed.
DO NOT wrap in code blocks or anything else.
</output>"""

AGENT_SYSTEM_PROMPT_TEMPLATE = """You are an AI assistant that helps users with terminal commands and tasks.
Your environment is {shell}. You have access to tools that can execute commands and read/write files.

When the user asks for help:
1. Analyze their request
2. Use the available tools to accomplish the task
3. Explain what you're doing and the results

Always prefer using tools over just providing text responses when actions are needed.
Be careful with destructive operations - confirm with the user if uncertain."""

FILE_REFERENCE_PATTERNS = [
    # Files with extensions
    re.compile(r"\b[\w\-./\\]+\.[a-zA-Z0-9]+\b"),
    # Quoted file paths
    re.compile(r"[\"']([^\"']+\.[a-zA-Z0-9]+)[\"']"),
    # Common config files
    re.compile(r"\b(package\.json|go\.mod|go\.sum|Dockerfile|Makefile|README\.md|\.gitignore)\b"),
]


def build_prompt(query: str, shell: str, append_context: bool = False, max_tokens: int = 1000) -> str:
    """
    Build the single-command prompt.

    Args:
        query: The user's request.
        shell: Target shell name.
        append_context: Include small files referenced in the query.
        max_tokens: Size limit for included files.

    Returns:
        The prompt text.
    """
    context = build_file_context(query, max_tokens) if append_context else ""
    return PROMPT_TEMPLATE.format(shell=shell, context=context, query=query)


def build_agent_system_prompt(shell: str) -> str:
    return AGENT_SYSTEM_PROMPT_TEMPLATE.format(shell=shell)


def extract_file_references(text: str) -> List[str]:
    """Find potential file paths in text, in order of first appearance, without duplicates."""
    files: List[str] = []
    seen = set()
    for pattern in FILE_REFERENCE_PATTERNS:
        for match in pattern.finditer(text):
            candidate = match.group(0).strip("\"'")
            if candidate not in seen:
                seen.add(candidate)
                files.append(candidate)
    return files


def is_small_file(path: str, max_tokens: int) -> bool:
    """Whether ``path`` is an existing regular file no larger than ``max_tokens`` tokens."""
    try:
        return os.path.isfile(path) and os.path.getsize(path) <= max_tokens * BYTES_PER_TOKEN
    except OSError:
        return False


def build_file_context(query: str, max_tokens: int) -> str:
    """Build the ``<file_contexts>`` section for small files referenced in the query."""
    sections: List[str] = []
    for file in extract_file_references(query):
        if not is_small_file(file, max_tokens):
            continue
        try:
            with open(file, encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError as e:
            logger.debug(f"Skipping unreadable file reference {file}: {e}")
            continue
        sections.append(f"<file name='{os.path.basename(file)}'>\n{content}\n</file>\n")

    if not sections:
        return ""
    return "<file_contexts>\n" + "".join(sections) + "</file_contexts>\n"
