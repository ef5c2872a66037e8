"""Gemini language model service."""

from .core import GeminiService
from .adapter import parse_generate_content_response, to_gemini_contents, to_gemini_tool

__all__ = ["GeminiService", "parse_generate_content_response", "to_gemini_contents", "to_gemini_tool"]
