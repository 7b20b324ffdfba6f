"""Generative model clients."""

from culinalens.generate.base import (
    GenerationConfig,
    GenerationError,
    GenerationResult,
    GenerativeClient,
    InlineImagePart,
    Part,
    TextPart,
)
from culinalens.generate.gemini import GeminiClient

__all__ = [
    "GeminiClient",
    "GenerationConfig",
    "GenerationError",
    "GenerationResult",
    "GenerativeClient",
    "InlineImagePart",
    "Part",
    "TextPart",
]
