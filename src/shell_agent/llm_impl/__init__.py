from .gemini import GeminiService
from .openai_api import OpenAIService
from .factory import (
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    PROVIDER_DISPLAY_NAMES,
    ServiceFactory,
    ServiceSettings,
    default_service_factory,
)

__all__ = [
    "GeminiService",
    "OpenAIService",
    "DEFAULT_BASE_URLS",
    "DEFAULT_MODELS",
    "PROVIDER_DISPLAY_NAMES",
    "ServiceFactory",
    "ServiceSettings",
    "default_service_factory",
]
