"""Command line interface for shell-agent."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence, Tuple

import pyperclip

from .. import __version__
from ..agent_core import (
    Agent,
    AgentConfig,
    AgentResult,
    GenerationOptions,
    LanguageModelService,
    ShellAgentError,
    TerminalConfirmationGate,
    default_registry,
    setup_logging,
)
from ..agent_core.exceptions import ConfigError, ProviderNotFoundError
from ..agent_core.logger import get_logger
from ..llm_impl import DEFAULT_MODELS, PROVIDER_DISPLAY_NAMES, default_service_factory
from .config import (
    API_KEY_ENV_VARS,
    DEFAULT_TEMPERATURE,
    AppConfig,
    ProviderSettings,
    config_exists,
    config_path,
    load_config,
)
from .history import History
from .output import (
    disable_colors,
    print_command,
    print_dim,
    print_error,
    print_info,
    print_success,
    print_warning,
    prompt_input,
)
from .prompts import build_agent_system_prompt, build_prompt
from .shell import determine_shell, display_name

logger = get_logger(__name__)

REVISION_KEYWORD = "actually"


def build_parser() -> argparse.ArgumentParser:
    """Parser for the main command."""
    parser = argparse.ArgumentParser(
        prog="shell-agent",
        description="Turn natural language into shell commands, or let an agent carry out the task.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  shell-agent list all python files changed today
  shell-agent -a "find the largest files in this directory and summarize them"
  shell-agent actually only in src/
  shell-agent init -p gemini
  shell-agent config show
  shell-agent config set provider gemini

Environment variables:
  SHELL_AGENT_PROVIDER      Provider (openai, gemini, deepseek, kimi, glm)
  SHELL_AGENT_MODEL         Model for the active provider
  SHELL_AGENT_AUTO_APPROVE  Auto-approve tool executions (true/1)
        """,
    )
    parser.add_argument("prompt", nargs="*", help="What you want to do (asked interactively when omitted)")
    parser.add_argument(
        "--provider", "-p", help="LLM provider to use (openai, gemini, deepseek, kimi, glm)"
    )
    parser.add_argument("--shell", "-s", help="Override shell detection (powershell, cmd, bash, zsh, fish)")
    parser.add_argument("--model", "-m", help="Model to use")
    parser.add_argument("--auto-approve", "-y", action="store_true", help="Auto-approve tool executions")
    parser.add_argument("--agent", "-a", action="store_true", help="Run in agent mode with tool calling")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"shell-agent {__version__}")
    return parser


def build_config_parser() -> argparse.ArgumentParser:
    """Parser for the ``config`` subcommand."""
    parser = argparse.ArgumentParser(prog="shell-agent config", description="Show or change the configuration.")
    sub = parser.add_subparsers(dest="action")
    sub.add_parser("show", help="Show current configuration")
    set_parser = sub.add_parser("set", help="Set a configuration value (provider, model, auto-approve)")
    set_parser.add_argument("key")
    set_parser.add_argument("value")
    return parser


def build_init_parser() -> argparse.ArgumentParser:
    """Parser for the ``init`` subcommand."""
    parser = argparse.ArgumentParser(
        prog="shell-agent init",
        description="Write a fresh configuration. Values not given as flags are asked for.",
    )
    parser.add_argument("--provider", "-p", help="Provider to enable and make the default")
    parser.add_argument("--api-key", "-k", help="API key for the provider")
    parser.add_argument("--model", "-m", default="", help="Model to use instead of the provider default")
    parser.add_argument("--auto-approve", "-y", action="store_true", help="Auto-approve tool executions")
    return parser


def revise_prompt(user_prompt: str, shell_name: str, history: History, keep_shell: bool) -> Tuple[str, str]:
    """Expand an ``actually ...`` prompt into a revision of the last history entry.

    Args:
        user_prompt: The prompt as typed.
        shell_name: Shell determined for this run.
        history: History to read the last entry from.
        keep_shell: Keep ``shell_name`` instead of the shell recorded with the last entry.

    Returns:
        The prompt and shell to use.
    """
    if not user_prompt.lower().startswith(REVISION_KEYWORD):
        return user_prompt, shell_name

    addendum = user_prompt[len(REVISION_KEYWORD):].strip()
    last_prompt, last_shell = history.load_last_entry()
    if not last_prompt:
        print_warning("No history found for revision.")
        return user_prompt, shell_name

    print_info("Revising previous prompt with new info...")
    if not keep_shell and last_shell:
        shell_name = last_shell
    return f"{last_prompt}. {addendum}", shell_name


async def run_simple_mode(
    service: LanguageModelService, cfg: AppConfig, settings: ProviderSettings, user_prompt: str, shell_name: str
) -> str:
    prompt = build_prompt(user_prompt, shell_name, cfg.shell.append_file_context, cfg.shell.max_context_tokens)
    return await service.complete(prompt, GenerationOptions(temperature=settings.temperature))


async def run_agent_mode(
    service: LanguageModelService,
    cfg: AppConfig,
    settings: ProviderSettings,
    user_prompt: str,
    shell_name: str,
    auto_approve: bool,
) -> AgentResult:
    registry = default_registry(enabled=cfg.agent.enabled_tools)
    agent_config = AgentConfig(
        auto_approve=auto_approve,
        max_iterations=cfg.agent.max_iterations,
        temperature=settings.temperature if settings.temperature is not None else DEFAULT_TEMPERATURE,
        max_tokens=settings.max_tokens,
    )
    agent = Agent(service, registry, agent_config)
    agent.set_system_prompt(build_agent_system_prompt(shell_name))
    if not auto_approve:
        agent.set_confirm_func(TerminalConfirmationGate(input_func=prompt_input))
    return await agent.run(user_prompt)


def copy_to_clipboard(command: str) -> bool:
    """Copy the command to the system clipboard, if one is available."""
    try:
        pyperclip.copy(command)
    except pyperclip.PyperclipException as e:
        logger.warning(f"Could not copy to clipboard: {e}")
        return False
    print_success("Copied to clipboard!")
    return True


def print_agent_summary(result: AgentResult, verbose: bool) -> None:
    if not result.tools_used:
        return
    print_dim(f"Used {len(result.tools_used)} tools in {result.iterations} iterations")
    if verbose:
        for execution in result.tools_used:
            status = "skipped" if execution.skipped else ("error" if execution.error else "ok")
            print_dim(f"  {execution.tool_name} [{status}] {execution.duration:.2f}s")


def run_init(argv: List[str]) -> int:
    args = build_init_parser().parse_args(argv)
    target = config_path()
    if config_exists(target):
        print_info(f"Replacing the existing configuration at {target}")

    cfg = AppConfig()
    try:
        provider_name = args.provider
        if not provider_name:
            choices = ", ".join(cfg.providers)
            provider_name = prompt_input(f"Default provider ({choices}) [{cfg.default_provider}]: ").strip()
            provider_name = provider_name or cfg.default_provider
        if provider_name not in cfg.providers:
            print_error(f"Unknown provider: {provider_name}")
            return 1

        api_key = args.api_key
        if api_key is None:
            label = PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name)
            env_var = API_KEY_ENV_VARS.get(provider_name, "")
            api_key = prompt_input(f"Enter your {label} API key (blank to use {env_var}): ").strip()
    except (EOFError, KeyboardInterrupt):
        print_warning("Setup cancelled.")
        return 1

    try:
        settings = cfg.configure_provider(provider_name, api_key, args.model)
        cfg.agent.auto_approve = args.auto_approve
        cfg.save(target)
    except ConfigError as e:
        print_error(f"Setup failed: {e}")
        return 1

    print_success("Configuration saved successfully!")
    print(f"Default provider: {PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name)}")
    print(f"Model: {settings.model}")
    print(f"Auto-approve: {str(cfg.agent.auto_approve).lower()}")
    print_dim("Run 'shell-agent <your prompt>' to get started.")
    return 0


def run_config(argv: List[str]) -> int:
    args = build_config_parser().parse_args(argv)

    if args.action == "set":
        try:
            # Environment overrides must not end up in the saved file.
            cfg = load_config(apply_env=False)
            message = cfg.set_value(args.key, args.value)
            cfg.save()
        except ConfigError as e:
            print_error(str(e))
            return 1
        print_success(message)
        return 0

    try:
        cfg = load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        return 1

    print(f"Default Provider: {cfg.default_provider}")
    print(f"Auto-Approve: {str(cfg.agent.auto_approve).lower()}")
    print(f"Max Iterations: {cfg.agent.max_iterations}")
    print(f"Enabled Tools: {', '.join(cfg.agent.enabled_tools)}")
    print()
    print("Providers:")
    for name, settings in cfg.providers.items():
        status = "enabled" if settings.enabled else "disabled"
        has_key = "key set" if settings.api_key else "no key"
        print(f"  {name}: {status} ({has_key}, model: {settings.model})")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "config":
        setup_logging(logging.WARNING)
        return run_config(argv[1:])
    if argv and argv[0] == "init":
        setup_logging(logging.WARNING)
        return run_init(argv[1:])

    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        cfg = load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        return 1

    if cfg.ui.no_color:
        disable_colors()

    user_prompt = " ".join(args.prompt).strip()
    if not user_prompt:
        try:
            user_prompt = prompt_input("What do you want? ").strip()
        except (EOFError, KeyboardInterrupt):
            user_prompt = ""
    if not user_prompt:
        print_warning("No prompt provided. Exiting.")
        return 1

    provider_name = args.provider or cfg.default_provider
    settings = cfg.provider_settings(provider_name)
    if settings is None:
        print_error(f"Unknown provider: {provider_name}")
        return 1
    if args.model:
        settings = settings.model_copy(update={"model": args.model})

    try:
        service = default_service_factory().create(provider_name, settings)
    except (ProviderNotFoundError, ConfigError) as e:
        print_error(f"Failed to initialize provider: {e}")
        return 1

    shell_name = determine_shell(args.shell or "", cfg.shell.override)
    history = History()
    user_prompt, shell_name = revise_prompt(
        user_prompt, shell_name, history, keep_shell=bool(args.shell or cfg.shell.override)
    )

    if args.verbose:
        model = settings.model or DEFAULT_MODELS.get(provider_name, "")
        provider_label = PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name)
        print_dim(f"Provider: {provider_label} ({model}), shell: {display_name(shell_name)}")

    wants_agent = args.agent or bool(cfg.agent.enabled_tools)
    if args.agent and not service.supports_tool_calling:
        print_warning(f"Provider '{provider_name}' does not support tool calling; using single-command mode.")
    use_agent = wants_agent and service.supports_tool_calling

    try:
        if use_agent:
            auto_approve = args.auto_approve or cfg.agent.auto_approve
            result = asyncio.run(run_agent_mode(service, cfg, settings, user_prompt, shell_name, auto_approve))
            print_agent_summary(result, args.verbose)
            if not result.success:
                if result.final_answer:
                    print_command(result.final_answer)
                print_error(f"Error: {result.error}")
                return 1
            completion = result.final_answer
        else:
            completion = asyncio.run(run_simple_mode(service, cfg, settings, user_prompt, shell_name))
    except KeyboardInterrupt:
        print_warning("Interrupted.")
        return 130
    except ShellAgentError as e:
        print_error(f"Error: {e}")
        return 1

    print_command(completion)
    copy_to_clipboard(completion)
    history.log(shell_name, user_prompt, completion)
    return 0
