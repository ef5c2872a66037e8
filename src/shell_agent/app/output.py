"""
Terminal output styling using 'rich'.

One themed console per process; colors are disabled when the config or
``NO_COLOR`` asks for it.
"""

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

COLORS = {
    "command": "bold bright_green",
    "success": "green",
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "prompt": "blue",
    "muted": "dim",
    "tool": "magenta",
}

shell_agent_theme = Theme(COLORS)

console = Console(theme=shell_agent_theme, highlight=False)
error_console = Console(theme=shell_agent_theme, highlight=False, stderr=True)


def disable_colors() -> None:
    console.no_color = True
    error_console.no_color = True


def print_command(command: str) -> None:
    # markup=False: commands routinely contain brackets.
    console.print(command, style="command", markup=False)


def print_success(msg: str) -> None:
    console.print(msg, style="success", markup=False)


def print_info(msg: str) -> None:
    console.print(msg, style="info", markup=False)


def print_warning(msg: str) -> None:
    error_console.print(msg, style="warning", markup=False)


def print_error(msg: str) -> None:
    error_console.print(msg, style="error", markup=False)


def print_dim(msg: str) -> None:
    console.print(msg, style="muted", markup=False)


def prompt_input(msg: str) -> str:
    """Read a line from the user with a styled prompt."""
    return console.input(f"[prompt]{escape(msg)}[/prompt]")
