"""
Search result entities.

ProviderResult is the single normalized hit shape every provider adapter
returns; nothing provider-specific travels past the adapter boundary.
AggregatedResult is one fused, deduplicated entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProviderResult:
    """One ranked hit from one provider."""

    title: str
    snippet: str
    link: str | None
    original_rank: int  # 1-based position in the provider's own response
    source: str
    context_link: str | None = None
    thumbnail_link: str | None = None


@dataclass
class ProviderPage:
    """Normalized response of one adapter call."""

    results: list[ProviderResult] = field(default_factory=list)
    total_results: str | None = None
    formatted_total_results: str | None = None


@dataclass
class ProviderOutcome:
    """What the orchestrator reports for one provider."""

    provider: str
    results: list[ProviderResult]
    elapsed_ms: int
    error: str | None = None
    total_results: str | None = None
    formatted_total_results: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def timing(self) -> int | None:
        """Elapsed milliseconds, or None when the call failed."""
        if self.error is not None:
            return None
        return self.elapsed_ms or None


@dataclass
class AggregatedResult:
    """One fused entry; exactly one per canonical key."""

    canonical_key: str
    link: str
    title: str
    snippet: str
    source: str
    rrf_score: float = 0.0
    sources: list[str] = field(default_factory=list)
    context_link: str | None = None
    thumbnail_link: str | None = None

    def to_client_dict(self, display_link: str, include_image: bool = False) -> dict[str, Any]:
        """Shape the entry for API clients."""
        item: dict[str, Any] = {
            "title": self.title,
            "link": self.link,
            "displayLink": display_link,
            "snippet": self.snippet,
            "source": self.source,
        }
        if include_image and self.context_link and self.thumbnail_link:
            item["image"] = {
                "contextLink": self.context_link,
                "thumbnailLink": self.thumbnail_link,
            }
        return item
