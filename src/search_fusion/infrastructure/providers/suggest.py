"""
Search suggestion client (Google autocomplete).

The ``client=chrome`` endpoint answers ``[query, [suggestions...], ...]``
encoded as GBK for Chinese locales, so the body is decoded explicitly.
"""

from __future__ import annotations

import json
import logging

import httpx

from search_fusion.core.exceptions import InvalidQueryError, NetworkError, ParseError, ProviderHttpError

logger = logging.getLogger(__name__)

SUGGEST_URL = "https://www.google.com/complete/search"


class SuggestionClient:
    """Fetches query completions for the search box."""

    name = "google-suggest"

    def __init__(
        self,
        *,
        language: str = "zh-CN",
        encoding: str = "gbk",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._language = language
        self._encoding = encoding
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def suggest(self, text: str) -> list[str]:
        """Return completions for ``text``."""
        q = text.strip() if isinstance(text, str) else ""
        if not q:
            raise InvalidQueryError(text)

        try:
            response = await self._client.get(
                SUGGEST_URL,
                params={"q": q, "client": "chrome", "hl": self._language},
            )
        except httpx.RequestError as e:
            raise NetworkError(str(e) or type(e).__name__, provider=self.name) from e

        if not response.is_success:
            raise ProviderHttpError(response.status_code, response.reason_phrase, provider=self.name)

        try:
            payload = json.loads(response.content.decode(self._encoding, errors="replace"))
        except ValueError as e:
            raise ParseError(str(e), source=self.name) from e

        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            raise ParseError("unexpected suggestion payload", source=self.name)
        return [s for s in payload[1] if isinstance(s, str)]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
