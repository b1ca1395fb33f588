"""
Response Cache

In-memory cache of aggregated search responses.
Uses cachetools.TLRUCache so every entry can carry its own TTL.

Features:
- Per-entry time-to-live (default 2 hours)
- LRU eviction when max size reached
- Deterministic keys built from the query parameters

No cross-request locking: two concurrent misses for the same key may both
compute and both store; the last write wins.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

from cachetools import TLRUCache

if TYPE_CHECKING:
    from search_fusion.domain.entities.query import SearchQuery

logger = logging.getLogger(__name__)

DEFAULT_TTL = 7200.0  # 2 hours
DEFAULT_MAX_SIZE = 1000


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _entry_expiry(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Cache hit rate (0-1)."""
        total = self.total_requests
        return self.hits / total if total > 0 else 0.0


class ResponseCache:
    """
    TTL key-value store for final search payloads.

    Example:
        cache = ResponseCache(ttl=7200)
        key = cache.make_key(query)
        if (data := cache.get(key)) is None:
            data = await compute()
            cache.set(key, data)
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: float = DEFAULT_TTL,
        timer: Any = time.monotonic,
    ) -> None:
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries
            ttl: Default time-to-live in seconds
            timer: Clock used for expiry (injectable for tests)
        """
        self._default_ttl = ttl
        self._cache: TLRUCache[str, _Entry] = TLRUCache(maxsize=max_size, ttu=_entry_expiry, timer=timer)
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @staticmethod
    def make_key(query: SearchQuery) -> str:
        """Deterministic serialization of the fields identifying a response."""
        return json.dumps(query.cache_fields(), sort_keys=True, ensure_ascii=False, separators=(",", ":"))

    def get(self, key: str) -> Any | None:
        """Cached value or None if absent/expired."""
        entry = self._cache.get(key)
        if entry is None:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        logger.debug(f"Cache hit: {key}")
        return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` for ``ttl`` seconds (default TTL when omitted)."""
        effective_ttl = self._default_ttl if ttl is None else ttl
        if effective_ttl <= 0:
            return
        self._cache[key] = _Entry(value, effective_ttl)

    def clear(self) -> int:
        """Clear all entries, returning how many were removed."""
        count = len(self._cache)
        self._cache.clear()
        return count

    def __len__(self) -> int:
        self._cache.expire()
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache
