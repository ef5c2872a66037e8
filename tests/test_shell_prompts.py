import pytest

from shell_agent.app.prompts import (
    build_agent_system_prompt,
    build_file_context,
    build_prompt,
    extract_file_references,
    is_small_file,
)
from shell_agent.app.shell import (
    BASH,
    CMD,
    FISH,
    POWERSHELL,
    UNKNOWN,
    ZSH,
    detect_shell,
    determine_shell,
    display_name,
    is_windows_shell,
    normalize_shell_name,
)


@pytest.mark.parametrize(
    "alias,expected",
    [("pwsh", POWERSHELL), ("PS", POWERSHELL), ("PowerShell", POWERSHELL), ("command", CMD), (" Zsh ", ZSH)],
)
def test_normalize_shell_name(alias: str, expected: str) -> None:
    assert normalize_shell_name(alias) == expected


@pytest.mark.parametrize(
    "shell_path,expected",
    [("/bin/bash", BASH), ("/usr/bin/zsh", ZSH), ("/opt/homebrew/bin/fish", FISH), ("/usr/bin/pwsh", POWERSHELL)],
)
def test_detect_shell_from_shell_variable(shell_path: str, expected: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("shell_agent.app.shell.os.name", "posix")

    assert detect_shell({"SHELL": shell_path}) == expected


def test_detect_shell_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("shell_agent.app.shell.os.name", "posix")

    assert detect_shell({}) == UNKNOWN


def test_detect_windows_shells() -> None:
    powershell_env = {"COMSPEC": "C:\\Windows\\cmd.exe", "PSModulePath": "C:\\WindowsPowerShell\\Modules"}
    cmd_env = dict(powershell_env, PROMPT="$P$G")

    assert detect_shell(powershell_env) == POWERSHELL
    assert detect_shell(cmd_env) == CMD


def test_determine_shell_precedence() -> None:
    environ = {"SHELL": "/bin/zsh"}

    assert determine_shell("pwsh", "fish", environ) == POWERSHELL
    assert determine_shell("", "fish", environ) == FISH


def test_shell_helpers() -> None:
    assert is_windows_shell(CMD)
    assert not is_windows_shell(BASH)
    assert display_name(POWERSHELL) == "PowerShell"
    assert display_name("nu") == "nu"


def test_build_prompt() -> None:
    prompt = build_prompt("list files", "zsh")

    assert "your environment is zsh" in prompt
    assert "compatible zsh command" in prompt
    assert "<user_input>\nlist files\n</user_input>" in prompt
    assert "<file_contexts>" not in prompt


def test_build_prompt_appends_small_files(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.txt").write_text("remember the milk")

    prompt = build_prompt("grep milk in notes.txt", "bash", append_context=True)

    assert "<file_contexts>\n<file name='notes.txt'>\nremember the milk\n</file>\n</file_contexts>\n" in prompt
    assert prompt.index("</file_contexts>") < prompt.index("<user_input>")


def test_build_agent_system_prompt() -> None:
    assert "Your environment is fish." in build_agent_system_prompt("fish")


def test_extract_file_references() -> None:
    refs = extract_file_references("compare 'docs/guide.md' with setup.py and the Makefile")

    assert "docs/guide.md" in refs
    assert "setup.py" in refs
    assert "Makefile" in refs
    assert len(refs) == len(set(refs))


def test_small_file_limits(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "small.txt").write_text("x" * 40)
    (tmp_path / "large.txt").write_text("x" * 41)

    assert is_small_file("small.txt", 10)
    assert not is_small_file("large.txt", 10)
    assert not is_small_file("missing.txt", 10)
    assert build_file_context("see large.txt", 10) == ""
