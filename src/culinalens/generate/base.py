"""Base interface for generative model clients."""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TextPart:
    """Plain text prompt segment."""

    text: str

    def to_api(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class InlineImagePart:
    """Image bytes sent inline alongside the prompt."""

    data: bytes
    mime_type: str

    def to_api(self) -> dict[str, Any]:
        return {
            "inline_data": {
                "mime_type": self.mime_type,
                "data": base64.b64encode(self.data).decode("ascii"),
            }
        }


Part = TextPart | InlineImagePart


@dataclass(frozen=True)
class GenerationConfig:
    """Per-call model selection and optional structured-output request."""

    model: str | None = None
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None

    @property
    def is_structured(self) -> bool:
        """Check if schema-constrained output was requested."""
        return self.response_schema is not None

    def to_api(self) -> dict[str, Any]:
        """Render the generationConfig body, empty when nothing is requested."""
        body: dict[str, Any] = {}
        if self.response_mime_type:
            body["responseMimeType"] = self.response_mime_type
        if self.response_schema is not None:
            body["responseSchema"] = self.response_schema
        return body


@dataclass
class GenerationResult:
    """Standardized result from a generation call."""

    text: str | None
    model: str | None = None
    finish_reason: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        """Check if the model produced any non-blank text."""
        return bool(self.text and self.text.strip())


class GenerationError(Exception):
    """Raised when the generative model cannot be reached or rejects a call."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


def as_parts(prompt: str | list[Part]) -> list[Part]:
    """Accept a bare prompt string wherever a part list is expected."""
    if isinstance(prompt, str):
        return [TextPart(prompt)]
    return list(prompt)


class GenerativeClient(ABC):
    """Abstract base class for text/vision-to-text model clients."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return client name for logging and identification."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str | list[Part],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """
        Run one generation call.

        Args:
            prompt: Prompt text, or ordered text/image parts.
            config: Model choice and optional response schema.

        Returns:
            GenerationResult whose text may be None when the model said nothing.

        Raises:
            GenerationError: On transport or API-level failure.
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
