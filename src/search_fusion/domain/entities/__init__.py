"""Domain entities for Search Fusion."""

from .ai_task import AI_SOURCE, AITask, TaskStatus
from .query import ResultType, SearchQuery, SortMode
from .result import AggregatedResult, ProviderOutcome, ProviderPage, ProviderResult

__all__ = [
    "AI_SOURCE",
    "AITask",
    "TaskStatus",
    "ResultType",
    "SearchQuery",
    "SortMode",
    "AggregatedResult",
    "ProviderOutcome",
    "ProviderPage",
    "ProviderResult",
]
