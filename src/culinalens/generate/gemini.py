"""Google Gemini REST client for recipe generation."""

from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from culinalens.config import get_settings
from culinalens.generate.base import (
    GenerationConfig,
    GenerationError,
    GenerationResult,
    GenerativeClient,
    Part,
    as_parts,
)
from culinalens.logging_config import get_logger

logger = get_logger(__name__)


def extract_text(data: dict[str, Any]) -> tuple[str | None, str | None]:
    """
    Pull the answer text and finish reason out of a generateContent response.

    Text parts of the first candidate are concatenated; thought parts are
    skipped. Returns (None, reason) when the model produced no text.
    """
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        return None, block_reason

    candidate = candidates[0]
    parts = (candidate.get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if isinstance(p.get("text"), str) and not p.get("thought")]
    text = "".join(texts)
    return (text or None), candidate.get("finishReason")


class GeminiClient(GenerativeClient):
    """Client for the Gemini generateContent endpoint."""

    BACKOFF_BASE = 1
    BACKOFF_MAX = 30

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.default_model = default_model or settings.gemini_text_model
        self.timeout = timeout or settings.generation_timeout
        self.max_attempts = max(1, max_attempts or settings.generation_max_attempts)
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        """Return client name."""
        return "gemini"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "User-Agent": "CulinaLens/0.1",
                    "x-goog-api-key": self.api_key,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_body(self, parts: list[Part], config: GenerationConfig) -> dict[str, Any]:
        """Build the generateContent request body."""
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [p.to_api() for p in parts]}],
        }
        generation_config = config.to_api()
        if generation_config:
            body["generationConfig"] = generation_config
        return body

    async def _request(self, model: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST to generateContent, retrying transport errors up to max_attempts."""
        url = f"{self.base_url}/models/{model}:generateContent"
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            return await client.post(url, json=body)

        try:
            response = await _do_request()
        except httpx.HTTPError as e:
            logger.error(f"Generation request to {model} failed: {type(e).__name__}: {e}")
            raise GenerationError(f"Generation request failed: {type(e).__name__}") from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"Gemini API error {response.status_code} for {model}: {error_detail}")
            raise GenerationError(
                f"Gemini API request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(
                "Gemini API returned a non-JSON body",
                status_code=response.status_code,
                response=response.text[:500],
            ) from e

        if not isinstance(data, dict):
            raise GenerationError(
                "Gemini API returned an unexpected body",
                status_code=response.status_code,
                response=str(data)[:500],
            )
        return data

    async def generate(
        self,
        prompt: str | list[Part],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Run one generateContent call and return its text."""
        config = config or GenerationConfig()
        model = config.model or self.default_model
        parts = as_parts(prompt)

        logger.info(
            f"Generating with {model}: {len(parts)} part(s), "
            f"structured={'yes' if config.is_structured else 'no'}"
        )
        data = await self._request(model, self.build_body(parts, config))

        text, finish_reason = extract_text(data)
        if text is None:
            logger.warning(f"Model {model} returned no text (finish_reason={finish_reason})")
        else:
            logger.debug(f"Model {model} returned {len(text)} chars")

        return GenerationResult(
            text=text,
            model=model,
            finish_reason=finish_reason,
            raw_response=data,
        )

    async def __aenter__(self) -> "GeminiClient":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
