import pytest

from shell_agent.agent_core import ConfigError, ProviderNotFoundError
from shell_agent.llm_impl import GeminiService, OpenAIService, ServiceFactory, default_service_factory
from shell_agent.llm_impl.factory import (
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    KIMI_CODING_BASE_URL,
    ServiceSettings,
)

from fakes import FakeService


def base_url(service: OpenAIService) -> str:
    return str(service.client.base_url).rstrip("/")


def test_default_factory_knows_every_provider() -> None:
    factory = default_service_factory()

    assert factory.names() == ["deepseek", "gemini", "glm", "kimi", "openai"]
    assert factory.has("openai")
    assert not factory.has("claude")


def test_unknown_provider() -> None:
    with pytest.raises(ProviderNotFoundError, match="provider not found: claude"):
        default_service_factory().create("claude", ServiceSettings(api_key="k"))


def test_missing_api_key() -> None:
    with pytest.raises(ConfigError, match="no API key"):
        default_service_factory().create("openai", ServiceSettings())


def test_register_custom_builder() -> None:
    factory = ServiceFactory()
    fake = FakeService()
    factory.register("fake", lambda settings: fake)

    assert factory.create("fake", ServiceSettings(api_key="k")) is fake


def test_openai_defaults() -> None:
    service = default_service_factory().create("openai", ServiceSettings(api_key="sk-test", temperature=0.3))

    assert isinstance(service, OpenAIService)
    assert service.model == DEFAULT_MODELS["openai"]
    assert service.temperature == 0.3
    assert service.supports_tool_calling is True


@pytest.mark.parametrize("provider", ["deepseek", "glm"])
def test_openai_compatible_providers(provider: str) -> None:
    service = default_service_factory().create(provider, ServiceSettings(api_key="k"))

    assert isinstance(service, OpenAIService)
    assert service.model == DEFAULT_MODELS[provider]
    assert base_url(service) == DEFAULT_BASE_URLS[provider]
    assert service.supports_tool_calling is True


def test_model_and_base_url_overrides() -> None:
    settings = ServiceSettings(api_key="k", model="deepseek-reasoner", base_url="http://localhost:8080/v1")

    service = default_service_factory().create("deepseek", settings)

    assert service.model == "deepseek-reasoner"  # type: ignore[attr-defined]
    assert base_url(service) == "http://localhost:8080/v1"  # type: ignore[arg-type]


def test_kimi_uses_coding_endpoint_and_disables_tools() -> None:
    service = default_service_factory().create("kimi", ServiceSettings(api_key="k"))

    assert isinstance(service, OpenAIService)
    assert service.supports_tool_calling is False
    assert base_url(service) == KIMI_CODING_BASE_URL


def test_kimi_plain_model_uses_moonshot_endpoint() -> None:
    service = default_service_factory().create("kimi", ServiceSettings(api_key="k", model="moonshot-v1-8k"))

    assert base_url(service) == DEFAULT_BASE_URLS["kimi"]  # type: ignore[arg-type]


def test_kimi_coding_key_uses_coding_endpoint() -> None:
    service = default_service_factory().create("kimi", ServiceSettings(api_key="sk-kimi-abc", model="moonshot-v1-8k"))

    assert base_url(service) == KIMI_CODING_BASE_URL  # type: ignore[arg-type]


def test_gemini() -> None:
    service = default_service_factory().create("gemini", ServiceSettings(api_key="k", max_tokens=256))

    assert isinstance(service, GeminiService)
    assert service.model == DEFAULT_MODELS["gemini"]
    assert service.max_tokens == 256
