"""Shell detection and normalization."""

import os
from typing import Mapping, Optional

POWERSHELL = "powershell"
CMD = "cmd"
BASH = "bash"
ZSH = "zsh"
FISH = "fish"
UNKNOWN = "unknown"

DISPLAY_NAMES = {
    POWERSHELL: "PowerShell",
    CMD: "Command Prompt",
    BASH: "Bash",
    ZSH: "Zsh",
    FISH: "Fish",
    UNKNOWN: "Unknown Shell",
}


def normalize_shell_name(shell: str) -> str:
    """Map aliases to canonical shell names; unrecognized names are returned lowercased."""
    shell = shell.strip().lower()
    if shell in ("powershell", "pwsh", "ps"):
        return POWERSHELL
    if shell in ("cmd", "command"):
        return CMD
    return shell


def detect_shell(environ: Optional[Mapping[str, str]] = None) -> str:
    """Guess the user's shell from the environment.

    Windows shells are recognized by their environment markers, other
    platforms by the basename of ``$SHELL``.
    """
    env = os.environ if environ is None else environ

    if os.name == "nt" or env.get("COMSPEC"):
        # cmd.exe sets PROMPT, PowerShell does not.
        if "powershell" in env.get("PSModulePath", "").lower() and "PROMPT" not in env:
            return POWERSHELL
        if env.get("COMSPEC"):
            return CMD

    shell_path = env.get("SHELL", "")
    if not shell_path:
        return UNKNOWN

    name = os.path.basename(shell_path).lower()
    for candidate in (BASH, ZSH, FISH):
        if candidate in name:
            return candidate
    if "pwsh" in name or "powershell" in name:
        return POWERSHELL
    return name or UNKNOWN


def determine_shell(
    arg_override: str = "",
    env_override: str = "",
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick the shell: command-line flag first, then configured override, then detection."""
    if arg_override:
        return normalize_shell_name(arg_override)
    if env_override:
        return normalize_shell_name(env_override)
    return detect_shell(environ)


def is_windows_shell(shell: str) -> bool:
    return shell in (POWERSHELL, CMD)


def display_name(shell: str) -> str:
    return DISPLAY_NAMES.get(shell, shell)
