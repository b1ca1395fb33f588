"""
Chat completions client for AI overviews.

Talks to any OpenAI-compatible ``/v1/chat/completions`` endpoint (the
default deployment fronts Gemini). One prompt in, one text answer out.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from search_fusion.core.exceptions import (
    ConfigurationError,
    NetworkError,
    ParseError,
    ProviderHttpError,
    ProviderTimeoutError,
    RateLimitError,
    is_retryable_error,
)
from search_fusion.infrastructure.providers.base import parse_api_keys, select_random_api_key

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://my-openai-gemini-demo.vercel.app/v1"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 60.0
EMPTY_REPLY = "AI did not generate a valid reply"

# Retry settings for transient backend errors
MAX_ATTEMPTS = 2
RETRY_DELAY = 1.0  # seconds


class ChatCompletionClient:
    """
    Minimal chat-completions client.

    Example:
        client = ChatCompletionClient(api_keys="sk-1,sk-2")
        text = await client.complete("Summarize: quantum computing")
    """

    name = "llm"

    def __init__(
        self,
        api_keys: str | list[str] | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.5,
        reasoning_effort: str | None = "low",
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_keys = parse_api_keys(api_keys)
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._model = model
        self._temperature = temperature
        self._reasoning_effort = reasoning_effort
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def is_configured(self) -> bool:
        return bool(self._api_keys)

    async def complete(self, prompt: str) -> str:
        """
        Send ``prompt`` as a single user message and return the reply text.

        Transient failures (timeouts, 429, 5xx, network) are retried with
        exponential backoff; the last error is re-raised.
        """
        if not prompt:
            raise ValueError("prompt must not be empty")

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_delay, max=self._retry_delay * 4),
            retry=retry_if_exception(is_retryable_error),
            reraise=True,
        ):
            with attempt:
                return await self._complete_once(prompt)

        raise RuntimeError("Unexpected retry loop exit")

    def build_payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
        }
        if self._reasoning_effort:
            payload["reasoning_effort"] = self._reasoning_effort
        return payload

    async def _complete_once(self, prompt: str) -> str:
        api_key = select_random_api_key(self._api_keys)
        if not api_key:
            raise ConfigurationError("Language model API key is not configured")

        try:
            response = await self._client.post(
                self._url,
                json=self.build_payload(prompt),
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Accept": "application/json",
                },
            )
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self._timeout) from e
        except httpx.RequestError as e:
            raise NetworkError(str(e) or type(e).__name__, provider=self.name) from e

        if response.status_code == 429:
            raise RateLimitError(response.text[:500], provider=self.name)
        if not response.is_success:
            raise ProviderHttpError(response.status_code, response.text[:500], provider=self.name)

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"invalid JSON body: {e}", source=self.name) from e

        content = extract_content(data)
        if content is None:
            logger.warning("Language model returned no message content")
            return EMPTY_REPLY
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def extract_content(data: Any) -> str | None:
    """Pull ``choices[0].message.content`` out of a completion payload."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) and content else None
