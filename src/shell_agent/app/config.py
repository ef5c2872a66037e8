"""Application configuration: JSON file, ``.env`` loading and environment overrides."""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ..agent_core.exceptions import ConfigError
from ..agent_core.logger import get_logger
from ..agent_core.tools.builtin import BUILTIN_TOOL_NAMES
from ..llm_impl.factory import DEFAULT_BASE_URLS, DEFAULT_MODELS, PROVIDER_OPENAI, ServiceSettings

logger = get_logger(__name__)

CONFIG_DIR_NAME = ".shell_agent"
CONFIG_FILE_NAME = "config.json"

ENV_PROVIDER = "SHELL_AGENT_PROVIDER"
ENV_MODEL = "SHELL_AGENT_MODEL"
ENV_SHELL = "SHELL_AGENT_SHELL"
ENV_AUTO_APPROVE = "SHELL_AGENT_AUTO_APPROVE"
ENV_APPEND_SMALL_CONTEXT = "SHELL_AGENT_APPEND_SMALL_CONTEXT"
ENV_NO_COLOR = "SHELL_AGENT_NO_COLOR"

API_KEY_ENV_VARS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GOOGLE_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "kimi": "MOONSHOT_API_KEY",
    "glm": "GLM_API_KEY",
}

DEFAULT_TEMPERATURE = 0.7

_TRUE_VALUES = ("1", "true")


class ProviderSettings(ServiceSettings):
    """Settings for a single provider."""

    enabled: bool = False


class AgentSettings(BaseModel):
    auto_approve: bool = False
    max_iterations: int = Field(default=10, ge=1)
    enabled_tools: List[str] = Field(default_factory=lambda: list(BUILTIN_TOOL_NAMES))


class ShellSettings(BaseModel):
    """
    Shell settings.

    Attributes:
        override: Shell name used instead of detection, empty to detect.
        append_file_context: Append small files referenced in a prompt.
        max_context_tokens: Size limit for appended files, at four bytes per token.
    """

    override: str = ""
    append_file_context: bool = False
    max_context_tokens: int = Field(default=1000, ge=1)


class UISettings(BaseModel):
    no_color: bool = False


def _default_providers() -> Dict[str, ProviderSettings]:
    return {
        name: ProviderSettings(
            enabled=name == PROVIDER_OPENAI,
            model=model,
            base_url=DEFAULT_BASE_URLS.get(name, ""),
            temperature=DEFAULT_TEMPERATURE,
        )
        for name, model in DEFAULT_MODELS.items()
    }


class AppConfig(BaseModel):
    """
    The complete application configuration.

    Attributes:
        default_provider: Provider used when none is given on the command line.
        providers: Per-provider settings keyed by provider name.
        agent: Agent mode settings.
        shell: Shell and prompt settings.
        ui: Output settings.
    """

    default_provider: str = PROVIDER_OPENAI
    providers: Dict[str, ProviderSettings] = Field(default_factory=_default_providers)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    shell: ShellSettings = Field(default_factory=ShellSettings)
    ui: UISettings = Field(default_factory=UISettings)

    def provider_settings(self, name: str) -> Optional[ProviderSettings]:
        return self.providers.get(name)

    def apply_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Apply environment variable overrides in place.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ

        provider = env.get(ENV_PROVIDER)
        if provider:
            self.default_provider = provider

        for name, var in API_KEY_ENV_VARS.items():
            key = env.get(var)
            if key and name in self.providers:
                self.providers[name].api_key = key

        model = env.get(ENV_MODEL)
        if model and self.default_provider in self.providers:
            self.providers[self.default_provider].model = model

        shell = env.get(ENV_SHELL)
        if shell:
            self.shell.override = shell

        if env.get(ENV_NO_COLOR) or env.get("NO_COLOR"):
            self.ui.no_color = True

        auto_approve = env.get(ENV_AUTO_APPROVE)
        if auto_approve:
            self.agent.auto_approve = auto_approve.lower() in _TRUE_VALUES

        append_context = env.get(ENV_APPEND_SMALL_CONTEXT)
        if append_context:
            if append_context.lower() in _TRUE_VALUES:
                self.shell.append_file_context = True
            elif append_context.isdigit() and int(append_context) > 0:
                self.shell.append_file_context = True
                self.shell.max_context_tokens = int(append_context)
            else:
                logger.warning(f"Ignoring invalid {ENV_APPEND_SMALL_CONTEXT} value: {append_context!r}")

    def set_value(self, key: str, value: str) -> str:
        """Set one user-facing configuration key.

        Args:
            key: One of ``provider``, ``model`` or ``auto-approve`` (aliases accepted).
            value: The new value.

        Returns:
            A confirmation message.

        Raises:
            ConfigError: For unknown keys or providers.
        """
        key = key.lower()
        if key in ("provider", "default_provider", "default-provider"):
            if value not in self.providers:
                raise ConfigError(f"Unknown provider: {value}")
            self.default_provider = value
            return f"Default provider set to: {value}"

        if key == "model":
            settings = self.providers.get(self.default_provider)
            if settings is None:
                raise ConfigError(f"Unknown provider: {self.default_provider}")
            settings.model = value
            return f"Model for {self.default_provider} set to: {value}"

        if key in ("auto-approve", "auto_approve", "autoapprove"):
            self.agent.auto_approve = value.lower() in ("true", "1", "yes")
            return f"Auto-approve set to: {str(self.agent.auto_approve).lower()}"

        raise ConfigError(f"Unknown config key: {key}. Available keys: provider, model, auto-approve")

    def configure_provider(self, name: str, api_key: str = "", model: str = "") -> ProviderSettings:
        """Make a provider the only enabled one and the default.

        Args:
            name: Provider to configure.
            api_key: API key to store. Left unchanged when empty.
            model: Model to use. Left unchanged when empty.

        Returns:
            The provider's settings.

        Raises:
            ConfigError: If the provider is unknown.
        """
        settings = self.providers.get(name)
        if settings is None:
            raise ConfigError(f"Unknown provider: {name}")

        for other_name, other in self.providers.items():
            other.enabled = other_name == name
        if api_key:
            settings.api_key = api_key
        if model:
            settings.model = model
        self.default_provider = name
        return settings

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the configuration as JSON, creating the directory with owner-only permissions.

        Returns:
            The path written to.
        """
        target = Path(path) if path else config_path()
        try:
            target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(self.model_dump_json(indent=2))
            os.chmod(target, 0o600)
        except OSError as e:
            raise ConfigError(f"failed to save config to {target}: {e}") from e
        logger.debug(f"Saved configuration to {target}")
        return target


def config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def config_exists(path: Optional[Union[str, Path]] = None) -> bool:
    return (Path(path) if path else config_path()).is_file()


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    apply_env: bool = True,
    load_env_file: bool = True,
) -> AppConfig:
    """
    Load the configuration.

    The file is layered over the defaults, so a file that names only some
    providers or sections keeps the defaults for the rest. A missing file
    yields the defaults.

    Args:
        path: Config file to read. Defaults to ``~/.shell_agent/config.json``.
        environ: Environment mapping for overrides. Defaults to ``os.environ``.
        apply_env: Apply environment overrides. Disable when the result will be saved back.
        load_env_file: Load a ``.env`` file into the process environment first.

    Returns:
        The loaded configuration.

    Raises:
        ConfigError: If the file cannot be read or is malformed.
    """
    if load_env_file:
        env_file = find_dotenv(usecwd=True)
        if env_file:
            logger.debug(f"Loading .env from: {env_file}")
            load_dotenv(env_file)

    target = Path(path) if path else config_path()
    cfg = AppConfig()

    if target.exists():
        try:
            data = json.loads(target.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"failed to read config file {target}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"malformed config file {target}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"malformed config file {target}: expected a JSON object")

        try:
            cfg = AppConfig.model_validate(_merge(cfg.model_dump(), data))
        except ValidationError as e:
            raise ConfigError(f"invalid config file {target}: {e}") from e
    else:
        logger.debug(f"No config file at {target}; using defaults.")

    if apply_env:
        cfg.apply_env_overrides(environ)
    return cfg
