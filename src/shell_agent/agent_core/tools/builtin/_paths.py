"""Path resolution shared by the file tools."""

import os
from pathlib import Path
from typing import Optional

from ...exceptions import ToolExecutionError

TRAVERSAL_ERROR = "path traversal not allowed"


def resolve_tool_path(path: str, working_dir: Optional[str] = None) -> Path:
    """Resolve a path supplied by the model into an absolute path.

    Relative paths resolve against ``working_dir`` or, absent one, the current
    directory. A relative path whose cleaned form still starts with ``..`` is
    rejected before the filesystem is touched. Absolute paths are accepted as is.

    Args:
        path: The path as given in the tool arguments.
        working_dir: Optional base directory for relative paths.

    Returns:
        The absolute, normalized path.

    Raises:
        ToolExecutionError: If the path escapes its base directory.
    """
    if os.path.isabs(path):
        return Path(os.path.normpath(path))

    cleaned = os.path.normpath(path)
    if cleaned == os.pardir or cleaned.startswith(os.pardir + os.sep):
        raise ToolExecutionError(TRAVERSAL_ERROR)

    base = working_dir or os.getcwd()
    return Path(os.path.abspath(os.path.join(base, cleaned)))
