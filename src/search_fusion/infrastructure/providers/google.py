"""
Google Custom Search Engine adapter.

API: https://developers.google.com/custom-search/v1/reference/rest/v1/cse/list
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from search_fusion.core.exceptions import ConfigurationError, ParseError
from search_fusion.domain.entities.query import SortMode
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

BASE_URL = "https://customsearch.googleapis.com/customsearch/v1"
ITEMS_PER_PAGE = 10

# Regional defaults for the Hong Kong Chinese index
DEFAULT_LOCALE = {"gl": "hk", "hl": "zh-HK", "lr": "lang_zh-HK"}


class GoogleSearchProvider(BaseProviderClient):
    """
    Google CSE adapter.

    Example:
        provider = GoogleSearchProvider(api_keys="k1,k2", search_engine_id="cx")
        page = await provider.search(SearchQuery("python asyncio"))
    """

    name = "google"
    base_url = BASE_URL

    def __init__(
        self,
        api_keys: str | list[str] | None = None,
        search_engine_id: str | None = None,
        *,
        locale: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._api_keys = parse_api_keys(api_keys)
        self._search_engine_id = (search_engine_id or "").strip()
        self._locale = DEFAULT_LOCALE if locale is None else locale

    def is_configured(self) -> bool:
        return bool(self._api_keys and self._search_engine_id)

    def build_params(self, query: SearchQuery, api_key: str) -> dict[str, str]:
        """Query-string parameters for one CSE request."""
        params = {
            "key": api_key,
            "cx": self._search_engine_id,
            "q": query.text,
            **self._locale,
            "start": str(query.offset(ITEMS_PER_PAGE)),
        }
        if query.is_image:
            params["searchType"] = "image"
        elif query.sort is SortMode.DATE:
            params["sort"] = "date"
        return params

    async def search(self, query: SearchQuery) -> ProviderPage:
        api_key = select_random_api_key(self._api_keys)
        if not api_key or not self._search_engine_id:
            raise ConfigurationError("Google API Key or Search Engine ID not configured")

        data = await self._get_json(self.base_url, params=self.build_params(query, api_key))
        return self.parse_page(data, image=query.is_image)

    def parse_page(self, data: Any, *, image: bool = False) -> ProviderPage:
        """Convert a CSE JSON payload into a ProviderPage."""
        if not isinstance(data, dict):
            raise ParseError("expected a JSON object", source=self.name)

        items = data.get("items") or []
        if not isinstance(items, list):
            raise ParseError("'items' is not a list", source=self.name)

        results: list[ProviderResult] = []
        for rank, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                continue
            image_info = object_field(item.get("image")) if image else {}
            title = text_field(item.get("title"))
            results.append(
                ProviderResult(
                    title=title or "",
                    snippet=text_field(item.get("snippet")) or title or "",
                    link=text_field(item.get("link")),
                    original_rank=rank,
                    source=self.name,
                    context_link=text_field(image_info.get("contextLink")),
                    thumbnail_link=text_field(image_info.get("thumbnailLink")),
                )
            )

        info = object_field(data.get("searchInformation"))
        return ProviderPage(
            results=results,
            total_results=info.get("totalResults"),
            formatted_total_results=info.get("formattedTotalResults"),
        )
