"""
Search provider adapters.

Each adapter hides one backend's request building and payload parsing
behind ``SearchProvider.search(query) -> ProviderPage``.
"""

from __future__ import annotations

from search_fusion.infrastructure.providers.base import (
    BaseProviderClient,
    SearchProvider,
    parse_api_keys,
    select_random_api_key,
)
from search_fusion.infrastructure.providers.brave import BraveSearchProvider
from search_fusion.infrastructure.providers.google import GoogleSearchProvider
from search_fusion.infrastructure.providers.image_proxy import ImageProxyClient, ProxiedImage
from search_fusion.infrastructure.providers.suggest import SuggestionClient

__all__ = [
    "BaseProviderClient",
    "SearchProvider",
    "parse_api_keys",
    "select_random_api_key",
    "BraveSearchProvider",
    "GoogleSearchProvider",
    "ImageProxyClient",
    "ProxiedImage",
    "SuggestionClient",
]
