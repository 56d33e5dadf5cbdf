"""OpenRouter chat completions client."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ai_pr_review.errors import (
    OpenRouterApiError,
    OpenRouterAuthError,
    OpenRouterError,
    OpenRouterRateLimitError,
    OpenRouterTimeoutError,
)

logger = logging.getLogger(__name__)

OPENROUTER_API_BASE = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_MS = 120_000


@dataclass
class OpenRouterConfig:
    """Configuration for the OpenRouter client."""

    api_key: str
    base_url: str = OPENROUTER_API_BASE
    timeout_ms: int | None = None
    retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 30.0

    @property
    def effective_timeout_ms(self) -> int:
        return self.timeout_ms or DEFAULT_TIMEOUT_MS


def _parse_retry_after(value: str | None) -> int | None:
    """Seconds from a Retry-After header; HTTP dates are ignored."""
    if not value:
        return None
    try:
        return max(0, int(float(value)))
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    """Best description of a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text or response.reason_phrase


def is_retryable(error: OpenRouterError) -> bool:
    """Whether a failed request is worth sending again."""
    if isinstance(error, (OpenRouterRateLimitError, OpenRouterTimeoutError)):
        return True
    if isinstance(error, OpenRouterApiError):
        return error.status_code is None or error.status_code >= 500
    return False


class OpenRouterClient:
    """Client for the OpenRouter chat completions API."""

    def __init__(self, config: OpenRouterConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the OpenRouter client.

        Args:
            config: Configuration for the client
            transport: Optional transport override (tests)
        """
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": "https://github.com",
                "X-Title": "AI PR Review",
            },
            timeout=config.effective_timeout_ms / 1000,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "OpenRouterClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def complete(
        self,
        model: str,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Request a chat completion, retrying transient failures.

        Args:
            model: OpenRouter model identifier
            messages: Chat messages
            max_tokens: Completion token limit
            temperature: Sampling temperature

        Returns:
            Completion text, or None if the model returned nothing

        Raises:
            OpenRouterError: once retries are exhausted or on a permanent failure
        """
        attempts = self.config.retries + 1
        for attempt in range(attempts):
            try:
                return await self._complete_once(model, messages, max_tokens, temperature)
            except OpenRouterError as e:
                if attempt + 1 >= attempts or not is_retryable(e):
                    raise
                delay = self._backoff_delay(attempt, e)
                logger.warning(
                    f"OpenRouter request failed ({e}); retry {attempt + 1}/{self.config.retries} "
                    f"in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
        return None

    def _backoff_delay(self, attempt: int, error: OpenRouterError) -> float:
        delay = min(self.config.backoff_base_seconds * (2**attempt), self.config.backoff_max_seconds)
        if isinstance(error, OpenRouterRateLimitError) and error.retry_after:
            delay = max(delay, float(error.retry_after))
        return delay

    async def _complete_once(
        self,
        model: str,
        messages: list[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        body = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        logger.debug(f"Requesting completion from {model} (max_tokens={max_tokens})")
        try:
            response = await self._client.post("/chat/completions", json=body)
        except httpx.TimeoutException as e:
            raise OpenRouterTimeoutError(self.config.effective_timeout_ms) from e
        except httpx.RequestError as e:
            raise OpenRouterApiError(f"Request to OpenRouter failed: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise OpenRouterAuthError(
                f"OpenRouter authentication failed: {_error_message(response)}. "
                "Please check your OPENROUTER_API_KEY."
            )
        if status == 429:
            raise OpenRouterRateLimitError(
                _error_message(response),
                retry_after=_parse_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 400:
            raise OpenRouterApiError(_error_message(response), status_code=status)

        try:
            data = response.json()
        except ValueError as e:
            raise OpenRouterApiError("OpenRouter returned a non-JSON response", status) from e

        if not isinstance(data, dict):
            raise OpenRouterApiError("OpenRouter returned an unexpected response", status)

        if isinstance(data.get("error"), dict):
            error = data["error"]
            code = error.get("code")
            raise OpenRouterApiError(
                str(error.get("message", "Unknown error")),
                status_code=code if isinstance(code, int) else None,
            )

        choices = data.get("choices") or []
        if not choices:
            logger.warning("OpenRouter returned no choices")
            return None

        first = choices[0] if isinstance(choices, list) else None
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str):
            return content or None
        if content is not None:
            logger.warning(f"OpenRouter returned non-text content: {type(content).__name__}")
        return None
