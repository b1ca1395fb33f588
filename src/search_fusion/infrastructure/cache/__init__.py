"""
Cache Infrastructure

Short-circuits repeated identical searches.
"""

from __future__ import annotations

from search_fusion.infrastructure.cache.response_cache import CacheStats, ResponseCache

__all__ = [
    "CacheStats",
    "ResponseCache",
]
