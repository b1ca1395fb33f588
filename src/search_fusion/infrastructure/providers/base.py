"""
Base Provider Client - Common HTTP request pattern for search backends.

Every adapter translates a SearchQuery into one backend call and the
backend's payload into a ProviderPage. Shared here:
- httpx.AsyncClient management (injectable for tests)
- Status handling: non-2xx → ProviderHttpError, 429 → RateLimitError
- JSON decoding: invalid payload → ParseError
- Circuit breaker per provider

Deadlines are enforced by the caller (``timed_call``); the client timeout
is only a backstop.
"""

from __future__ import annotations

import abc
import logging
import random
from typing import TYPE_CHECKING, Any

import httpx
from typing_extensions import Self

from search_fusion.core.async_utils import CircuitBreaker
from search_fusion.core.exceptions import (
    NetworkError,
    ParseError,
    ProviderHttpError,
    ProviderTimeoutError,
    RateLimitError,
)

if TYPE_CHECKING:
    from search_fusion.domain.entities.query import SearchQuery
    from search_fusion.domain.entities.result import ProviderPage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def parse_api_keys(raw_keys: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Split a comma-separated key string into a clean list."""
    if not raw_keys:
        return []
    if isinstance(raw_keys, str):
        raw_keys = raw_keys.split(",")
    return [key.strip() for key in raw_keys if key and key.strip()]


def select_random_api_key(raw_keys: str | list[str] | tuple[str, ...] | None) -> str | None:
    """
    Pick one key at random from the configured set.

    Spreads load across keys; it is not a rotation or security policy.
    """
    keys = parse_api_keys(raw_keys)
    if not keys:
        return None
    return random.choice(keys)


def text_field(value: Any) -> str | None:
    """Return ``value`` if the payload carried a string, otherwise None."""
    return value if isinstance(value, str) else None


def object_field(value: Any) -> dict[str, Any]:
    """Return ``value`` if the payload carried a JSON object, otherwise ``{}``."""
    return value if isinstance(value, dict) else {}


class SearchProvider(abc.ABC):
    """Interface every search backend adapter implements."""

    name: str = "provider"

    @abc.abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials required for a call are present."""

    @abc.abstractmethod
    async def search(self, query: SearchQuery) -> ProviderPage:
        """
        Run ``query`` against the backend.

        Raises:
            ProviderTimeoutError, ProviderHttpError, ParseError,
            ConfigurationError
        """

    async def aclose(self) -> None:  # noqa: B027
        """Release network resources."""


class BaseProviderClient(SearchProvider):
    """
    httpx-backed adapter base.

    Subclasses set ``name`` and ``base_url`` and implement ``is_configured``
    and ``search``, using ``_get_json`` for the actual request.
    """

    base_url: str = ""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ) -> None:
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=10, recovery_timeout=60.0, name=self.name
        )

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode a JSON body, raising typed provider errors."""
        async with self._circuit_breaker:
            try:
                response = await self._client.get(url, params=params, headers=headers)
            except httpx.TimeoutException as e:
                raise ProviderTimeoutError(self.name, self._timeout) from e
            except httpx.RequestError as e:
                raise NetworkError(str(e) or type(e).__name__, provider=self.name) from e

            self._raise_for_status(response)

            try:
                return response.json()
            except ValueError as e:
                raise ParseError(f"invalid JSON body: {e}", source=self.name) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        detail = response.text[:500]
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            try:
                retry_seconds = float(retry_after) if retry_after else None
            except ValueError:
                retry_seconds = None
            raise RateLimitError(detail, provider=self.name, retry_after=retry_seconds)
        raise ProviderHttpError(response.status_code, detail, provider=self.name)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
