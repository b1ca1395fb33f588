"""
Aggregated Search

Key Components:
- FanOutOrchestrator: concurrent, isolated provider calls
- canonicalize: link → dedup key
- RankFusionEngine: Reciprocal Rank Fusion + dedup
- SearchService: request path (cache, trigger, fan-out, fusion)

Architecture:
    SearchQuery
        │
        ▼
    ┌──────────────────┐
    │ FanOutOrchestrator│  ← Parallel, deadline-bounded provider calls
    └────────┬─────────┘
             │
    ┌────────┴────────┐
    ▼                 ▼
  Google            Brave
    │                 │
    └────────┬────────┘
             ▼
    ┌──────────────────┐
    │ RankFusionEngine │  ← Canonical-key dedup + RRF (k=60)
    └────────┬─────────┘
             ▼
    AggregatedResult[]
"""

from __future__ import annotations

from search_fusion.application.search.canonicalizer import canonicalize, display_link
from search_fusion.application.search.orchestrator import FanOutOrchestrator
from search_fusion.application.search.rank_fusion import (
    RRF_K,
    RankFusionEngine,
    reciprocal_rank_fusion,
    rrf_contribution,
)
from search_fusion.application.search.service import SearchService

__all__ = [
    "canonicalize",
    "display_link",
    "FanOutOrchestrator",
    "RRF_K",
    "RankFusionEngine",
    "reciprocal_rank_fusion",
    "rrf_contribution",
    "SearchService",
]
