"""Re-export the language model service interface and its response models."""

from .base import Choice, GenerationOptions, GenerationResult, LanguageModelService, STOP_REASONS, normalize_stop_reason

__all__ = [
    "Choice",
    "GenerationOptions",
    "GenerationResult",
    "LanguageModelService",
    "STOP_REASONS",
    "normalize_stop_reason",
]
