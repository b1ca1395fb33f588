"""
Brave Search API adapter.

API: https://api.search.brave.com/app/documentation
- Web search:   /res/v1/web/search
- Image search: /res/v1/images/search
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from search_fusion.core.exceptions import ConfigurationError, ParseError
from search_fusion.domain.entities.result import ProviderPage, ProviderResult
from search_fusion.infrastructure.providers.base import (
    BaseProviderClient,
    object_field,
    parse_api_keys,
    select_random_api_key,
    text_field,
)

if TYPE_CHECKING:
    from search_fusion.domain.entities.query import SearchQuery

logger = logging.getLogger(__name__)

BASE_URL = "https://api.search.brave.com/res/v1"
WEB_ENDPOINT = f"{BASE_URL}/web/search"
IMAGE_ENDPOINT = f"{BASE_URL}/images/search"


class BraveSearchProvider(BaseProviderClient):
    """Brave Search adapter for web and image results."""

    name = "brave"
    base_url = BASE_URL

    def __init__(self, api_keys: str | list[str] | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._api_keys = parse_api_keys(api_keys)

    def is_configured(self) -> bool:
        return bool(self._api_keys)

    async def search(self, query: SearchQuery) -> ProviderPage:
        api_key = select_random_api_key(self._api_keys)
        if not api_key:
            raise ConfigurationError("Brave API Key not configured")

        url = IMAGE_ENDPOINT if query.is_image else WEB_ENDPOINT
        data = await self._get_json(
            url,
            params={"q": query.text},
            headers={"X-Subscription-Token": api_key},
        )
        if query.is_image:
            return ProviderPage(results=self.parse_images(data))
        return ProviderPage(results=self.parse_web(data))

    def parse_web(self, data: Any) -> list[ProviderResult]:
        """Convert a web search payload (``web.results``)."""
        web = _require_object(data, self.name).get("web") or {}
        return [
            ProviderResult(
                title=text_field(item.get("title")) or "",
                snippet=text_field(item.get("description")) or "",
                link=text_field(item.get("url")),
                original_rank=rank,
                source=self.name,
            )
            for rank, item in enumerate(_result_list(web, self.name), start=1)
        ]

    def parse_images(self, data: Any) -> list[ProviderResult]:
        """
        Convert an image search payload (``results``).

        The full-size image URL is the result link; the page hosting it
        becomes the context link.
        """
        results: list[ProviderResult] = []
        for rank, item in enumerate(_result_list(_require_object(data, self.name), self.name), start=1):
            title = text_field(item.get("title"))
            results.append(
                ProviderResult(
                    title=title or "Image Result",
                    snippet=title or "No description available.",
                    link=text_field(object_field(item.get("properties")).get("url")),
                    original_rank=rank,
                    source=self.name,
                    context_link=text_field(item.get("url")),
                    thumbnail_link=text_field(object_field(item.get("thumbnail")).get("src")),
                )
            )
        return results


def _require_object(data: Any, source: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError("expected a JSON object", source=source)
    return data


def _result_list(container: Any, source: str) -> list[dict[str, Any]]:
    if not isinstance(container, dict):
        raise ParseError("unexpected result container", source=source)
    items = container.get("results") or []
    if not isinstance(items, list):
        raise ParseError("'results' is not a list", source=source)
    return [item for item in items if isinstance(item, dict)]
