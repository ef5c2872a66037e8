"""Explicit provider name to service factory map.

The map is built by ``default_service_factory()`` at process start and
passed to whoever needs to create services; nothing registers itself at
import time.
"""

import threading
from typing import Callable, Dict, List, Optional

from google import genai
from openai import AsyncOpenAI
from pydantic import BaseModel

from ..agent_core.base import LanguageModelService
from ..agent_core.exceptions import ConfigError, ProviderNotFoundError
from ..agent_core.logger import get_logger
from .gemini import GeminiService
from .openai_api import OpenAIService

logger = get_logger(__name__)

PROVIDER_OPENAI = "openai"
PROVIDER_GEMINI = "gemini"
PROVIDER_DEEPSEEK = "deepseek"
PROVIDER_KIMI = "kimi"
PROVIDER_GLM = "glm"

DEFAULT_MODELS: Dict[str, str] = {
    PROVIDER_OPENAI: "gpt-4o",
    PROVIDER_GEMINI: "gemini-2.0-flash",
    PROVIDER_DEEPSEEK: "deepseek-chat",
    PROVIDER_KIMI: "kimi-coding/k2p5",
    PROVIDER_GLM: "glm-4",
}

DEFAULT_BASE_URLS: Dict[str, str] = {
    PROVIDER_DEEPSEEK: "https://api.deepseek.com/v1",
    PROVIDER_KIMI: "https://api.moonshot.cn/v1",
    PROVIDER_GLM: "https://open.bigmodel.cn/api/paas/v4",
}

KIMI_CODING_BASE_URL = "https://api.kimi.com/coding/v1"

PROVIDER_DISPLAY_NAMES: Dict[str, str] = {
    PROVIDER_OPENAI: "OpenAI",
    PROVIDER_GEMINI: "Google Gemini",
    PROVIDER_DEEPSEEK: "DeepSeek",
    PROVIDER_KIMI: "Kimi (Moonshot)",
    PROVIDER_GLM: "GLM (Zhipu AI)",
}


class ServiceSettings(BaseModel):
    """
    Connection settings for one provider.

    Attributes:
        api_key: API key for the provider.
        model: Model name; the provider default is used when empty.
        base_url: Endpoint override; the provider default is used when empty.
        temperature: Default sampling temperature.
        max_tokens: Default cap on generated tokens.
    """

    api_key: str = ""
    model: str = ""
    base_url: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


ServiceBuilder = Callable[[ServiceSettings], LanguageModelService]


class ServiceFactory:
    """Maps provider names to builders of Language Model Services."""

    def __init__(self) -> None:
        self._builders: Dict[str, ServiceBuilder] = {}
        self._lock = threading.Lock()

    def register(self, name: str, builder: ServiceBuilder) -> None:
        """Register (or replace) the builder for a provider name."""
        with self._lock:
            self._builders[name] = builder

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._builders

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._builders)

    def create(self, name: str, settings: ServiceSettings) -> LanguageModelService:
        """
        Create a service for the named provider.

        Args:
            name: Provider name.
            settings: Connection settings.

        Returns:
            A ready-to-use service.

        Raises:
            ProviderNotFoundError: If no builder is registered under ``name``.
            ConfigError: If the settings carry no API key.
        """
        with self._lock:
            builder = self._builders.get(name)
        if builder is None:
            raise ProviderNotFoundError(f"provider not found: {name}")
        if not settings.api_key:
            raise ConfigError(f"no API key configured for provider '{name}'")
        logger.debug(f"Creating service for provider '{name}'.")
        return builder(settings)


def _model_for(provider: str, settings: ServiceSettings) -> str:
    return settings.model or DEFAULT_MODELS[provider]


def build_openai(settings: ServiceSettings) -> LanguageModelService:
    client = AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url or None)
    return OpenAIService(
        client,
        _model_for(PROVIDER_OPENAI, settings),
        temp=settings.temperature,
        max_tokens=settings.max_tokens,
    )


def _openai_compatible(provider: str) -> ServiceBuilder:
    def build(settings: ServiceSettings) -> LanguageModelService:
        client = AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url or DEFAULT_BASE_URLS[provider])
        return OpenAIService(
            client,
            _model_for(provider, settings),
            temp=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    return build


def build_kimi(settings: ServiceSettings) -> LanguageModelService:
    """Kimi / Moonshot. Coding models and ``sk-kimi-`` keys use the coding endpoint."""
    model = _model_for(PROVIDER_KIMI, settings)
    base_url = settings.base_url
    if not base_url:
        if model.startswith("kimi-coding") or settings.api_key.startswith("sk-kimi-"):
            base_url = KIMI_CODING_BASE_URL
        else:
            base_url = DEFAULT_BASE_URLS[PROVIDER_KIMI]
    client = AsyncOpenAI(api_key=settings.api_key, base_url=base_url)
    # The Kimi endpoints do not accept the standard tool calling format.
    return OpenAIService(
        client,
        model,
        temp=settings.temperature,
        max_tokens=settings.max_tokens,
        supports_tool_calling=False,
    )


def build_gemini(settings: ServiceSettings) -> LanguageModelService:
    client = genai.Client(api_key=settings.api_key)
    return GeminiService(
        client.aio,
        _model_for(PROVIDER_GEMINI, settings),
        temp=settings.temperature,
        max_tokens=settings.max_tokens,
    )


def default_service_factory() -> ServiceFactory:
    """Build the factory holding every supported provider."""
    factory = ServiceFactory()
    factory.register(PROVIDER_OPENAI, build_openai)
    factory.register(PROVIDER_GEMINI, build_gemini)
    factory.register(PROVIDER_DEEPSEEK, _openai_compatible(PROVIDER_DEEPSEEK))
    factory.register(PROVIDER_KIMI, build_kimi)
    factory.register(PROVIDER_GLM, _openai_compatible(PROVIDER_GLM))
    return factory
