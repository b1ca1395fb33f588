"""
Rank Fusion Engine - Reciprocal Rank Fusion over provider result lists.

RRF formula:
    RRF(d) = Σ_p 1/(k + rank_p(d)), k=60

where p iterates over the provider lists containing d and rank_p(d) is the
1-based position of d in provider p's own response. A link near the top of
several independent providers beats a link at the top of only one.

Architecture Decision:
    Fusion is pure: no I/O, no shared state. Identity is the canonical key
    from ``canonicalize``; the first-seen link, title and source are kept for
    display.

References:
    - Cormack et al. (2009). "Reciprocal Rank Fusion outperforms Condorcet and
      individual Rank Learning Methods"
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from search_fusion.application.search.canonicalizer import canonicalize
from search_fusion.domain.entities.result import AggregatedResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from search_fusion.domain.entities.result import ProviderResult

logger = logging.getLogger(__name__)

RRF_K = 60  # Standard constant from TREC evaluations


def rrf_contribution(rank: int, k: int = RRF_K) -> float:
    """Score contributed by one appearance at 1-based ``rank``."""
    return 1.0 / (k + rank)


class RankFusionEngine:
    """
    Merges per-provider ranked lists into one deduplicated ranking.

    Merge policy when several hits share a canonical key:
    - scores sum
    - the longer non-empty snippet wins
    - image fields are back-filled from whichever hit supplies them

    Example:
        >>> engine = RankFusionEngine()
        >>> fused = engine.fuse(google_results + brave_results)
        >>> fused[0].rrf_score
        0.0322...
    """

    def __init__(self, k: int = RRF_K) -> None:
        if k < 0:
            raise ValueError(f"RRF constant must be non-negative, got {k}")
        self.k = k

    def fuse(self, results: Iterable[ProviderResult]) -> list[AggregatedResult]:
        """
        Fuse the concatenation of all provider lists.

        Returns entries sorted by descending RRF score. Ties keep the order
        in which their keys were first encountered.
        """
        merged: dict[str, AggregatedResult] = {}
        dropped = 0

        for result in results:
            if not result.link or not isinstance(result.link, str):
                dropped += 1
                continue

            key = canonicalize(result.link)
            contribution = rrf_contribution(result.original_rank, self.k)

            existing = merged.get(key)
            if existing is None:
                merged[key] = AggregatedResult(
                    canonical_key=key,
                    link=result.link,
                    title=result.title,
                    snippet=result.snippet or "",
                    source=result.source,
                    rrf_score=contribution,
                    sources=[result.source],
                    context_link=result.context_link,
                    thumbnail_link=result.thumbnail_link,
                )
                continue

            self._merge_into(existing, result, contribution)

        if dropped:
            logger.debug(f"Dropped {dropped} results without a usable link")

        # sorted() is stable, so equal scores keep first-encounter order
        return sorted(merged.values(), key=lambda r: -r.rrf_score)

    @staticmethod
    def _merge_into(existing: AggregatedResult, result: ProviderResult, contribution: float) -> None:
        existing.rrf_score += contribution
        existing.sources.append(result.source)

        if result.snippet and len(result.snippet) > len(existing.snippet):
            existing.snippet = result.snippet
        if result.thumbnail_link and not existing.thumbnail_link:
            existing.thumbnail_link = result.thumbnail_link
        if result.context_link and not existing.context_link:
            existing.context_link = result.context_link


def reciprocal_rank_fusion(
    results: Iterable[ProviderResult],
    k: int = RRF_K,
) -> list[AggregatedResult]:
    """Functional shortcut for ``RankFusionEngine(k).fuse(results)``."""
    return RankFusionEngine(k).fuse(results)
