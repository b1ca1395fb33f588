"""
Search Fusion - Aggregated web search with rank fusion and AI overviews

Fans a query out to several search backends concurrently, merges the
answers with Reciprocal Rank Fusion, and optionally generates an AI
overview in the background for queries that look like information needs.

Usage:
    from search_fusion.container import create_container

    container = create_container()
    service = container.search_service()
    response = await service.search("what is quantum computing")

    for item in response["data"]["items"]:
        print(f"{item['title']}: {item['link']}")

Features:
    - Google Custom Search + Brave Search adapters
    - Per-provider deadlines; a failing backend never fails the request
    - URL canonicalization and RRF (k=60) deduplication
    - Naive Bayes + heuristic AI overview trigger
    - Background AI overview tasks polled by id
    - TTL response cache
"""

__version__ = "0.1.0"

from .application.search import RankFusionEngine, SearchService, canonicalize
from .domain.entities import AggregatedResult, ProviderResult, SearchQuery

__all__ = [
    "__version__",
    "AggregatedResult",
    "ProviderResult",
    "RankFusionEngine",
    "SearchQuery",
    "SearchService",
    "canonicalize",
]
