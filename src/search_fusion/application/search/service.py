"""
SearchService - Request path for aggregated search and AI overview polling.

    query ──► validate ──► cache ──hit──► cached data
                             │
                            miss
                             │
             ┌───────────────┴───────────────┐
             ▼                               ▼
      OverviewTrigger ──yes──► OverviewTaskRunner (detached)
             │
             ▼
    FanOutOrchestrator ──► RankFusionEngine ──► cache.set ──► response

Every response is an envelope ``{success, data | error, totalResponseTime,
apiTimings}``. Only validation and configuration problems fail a request;
provider trouble only shrinks the result list and nulls that provider's
timing.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import TYPE_CHECKING, Any

from search_fusion.application.search.canonicalizer import display_link
from search_fusion.application.search.rank_fusion import RankFusionEngine
from search_fusion.core.exceptions import (
    ConfigurationError,
    DuplicateTaskError,
    InvalidParameterError,
    SearchFusionError,
    user_facing_message,
)
from search_fusion.domain.entities.ai_task import AI_SOURCE
from search_fusion.domain.entities.query import SearchQuery

if TYPE_CHECKING:
    from search_fusion.application.overview.runner import OverviewTaskRunner
    from search_fusion.application.overview.trigger import OverviewTrigger
    from search_fusion.application.search.orchestrator import FanOutOrchestrator
    from search_fusion.domain.entities.result import AggregatedResult, ProviderOutcome
    from search_fusion.infrastructure.cache.response_cache import ResponseCache

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "AI overview is still being generated."


class SearchService:
    """
    Aggregated search facade used by the HTTP layer.

    Example:
        service = container.search_service()
        response = await service.search("什么是量子计算", page=1)
        if response["data"]["aiTask"]["hasAI"]:
            poll = service.poll_overview(response["data"]["aiTask"]["taskId"])
    """

    def __init__(
        self,
        orchestrator: FanOutOrchestrator,
        cache: ResponseCache,
        trigger: OverviewTrigger,
        runner: OverviewTaskRunner,
        fusion: RankFusionEngine | None = None,
        cache_ttl: float | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._cache = cache
        self._trigger = trigger
        self._runner = runner
        self._fusion = fusion or RankFusionEngine()
        self._cache_ttl = cache_ttl

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(
        self,
        text: Any,
        page: Any = None,
        start_index: Any = None,
        sort: Any = None,
        result_type: Any = None,
    ) -> dict[str, Any]:
        """Run one aggregated search and return the response envelope."""
        started = time.perf_counter()

        try:
            query = SearchQuery.from_params(text, page, start_index, sort, result_type)

            cache_key = self._cache.make_key(query)
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.info(f"[Cache] hit for key: {cache_key}")
                return self._success(cached, started, self._empty_timings())

            logger.info(f'[Search] aggregating query: "{query.text}", type: "{query.result_type.value}"')

            should_trigger = self._should_trigger(query)
            if not should_trigger and not self._orchestrator.has_configured_providers:
                raise ConfigurationError("No search engine is configured and AI overview was not triggered")

            task_id = self._launch_overview(query) if should_trigger else None
            outcomes = await self._orchestrator.run(query, ai_triggered=task_id is not None)

            fused = self._fusion.fuse(itertools.chain.from_iterable(o.results for o in outcomes))
            data = self.build_data(query, outcomes, fused, task_id)

            if outcomes and not any(o.succeeded for o in outcomes):
                logger.warning("[Cache] every provider failed; response not cached")
            else:
                self._cache.set(cache_key, data, self._cache_ttl)

            return self._success(data, started, self._timings(outcomes))

        except SearchFusionError as e:
            logger.warning(f"[Search] request failed: {e}")
            return self._failure(user_facing_message(e), started)
        except Exception as e:
            logger.exception(f"[Search] unexpected error: {e}")
            return self._failure(user_facing_message(e), started)

    def _should_trigger(self, query: SearchQuery) -> bool:
        if not self._runner.is_enabled:
            logger.warning("[AI Trigger] language model API key not configured; skipping AI overview")
            return False

        decision = self._trigger.decide(query.text)
        logger.info(f"[AI Trigger] query [{query.text}] -> trigger: {decision.trigger} ({decision.reason})")
        return decision.trigger

    def _launch_overview(self, query: SearchQuery) -> str | None:
        try:
            return self._runner.submit(query.text)
        except DuplicateTaskError as e:
            logger.error(f"[AI Trigger] {e}; AI overview skipped")
            return None

    # -------------------------------------------------------------------------
    # Response shaping
    # -------------------------------------------------------------------------

    @staticmethod
    def build_data(
        query: SearchQuery,
        outcomes: list[ProviderOutcome],
        fused: list[AggregatedResult],
        task_id: str | None,
    ) -> dict[str, Any]:
        """Client-shaped ``data`` block of a successful search."""
        timings = [o.timing for o in outcomes if o.timing]
        average_ms = sum(timings) / len(timings) if timings else 0

        reported = next((o for o in outcomes if o.total_results), None)
        total_results = reported.total_results if reported else str(len(fused))
        formatted_total = (reported.formatted_total_results if reported else None) or f"{len(fused)} results"

        return {
            "searchInformation": {
                "searchTime": average_ms,
                "formattedSearchTime": f"{average_ms / 1000:.2f} seconds",
                "totalResults": total_results,
                "formattedTotalResults": formatted_total,
            },
            "items": [item.to_client_dict(display_link(item.link), include_image=query.is_image) for item in fused],
            "aiTask": {
                "hasAI": task_id is not None,
                "taskId": task_id,
                "source": AI_SOURCE,
            },
        }

    def _empty_timings(self) -> dict[str, int | None]:
        return {name: None for name in self._orchestrator.provider_names}

    def _timings(self, outcomes: list[ProviderOutcome]) -> dict[str, int | None]:
        timings = self._empty_timings()
        for outcome in outcomes:
            timings[outcome.provider] = outcome.timing
        return timings

    @staticmethod
    def _success(data: dict[str, Any], started: float, timings: dict[str, int | None]) -> dict[str, Any]:
        return {
            "success": True,
            "data": data,
            "totalResponseTime": _elapsed_ms(started),
            "apiTimings": timings,
        }

    @staticmethod
    def _failure(message: str, started: float) -> dict[str, Any]:
        return {
            "success": False,
            "error": message,
            "totalResponseTime": _elapsed_ms(started),
            "apiTimings": None,
        }

    # -------------------------------------------------------------------------
    # AI overview polling
    # -------------------------------------------------------------------------

    def poll_overview(self, task_id: str) -> dict[str, Any]:
        """
        Poll an AI overview task.

        A finished task is returned once and then forgotten. Unknown ids get
        the same pending-shaped answer as a task still being generated.
        """
        if not isinstance(task_id, str) or not task_id.strip():
            raise InvalidParameterError("taskId", task_id, "a non-empty task id")

        task = self._runner.registry.poll(task_id)
        if task is None:
            return {
                "success": True,
                "data": {"taskId": task_id, "status": "pending", "message": PENDING_MESSAGE},
            }
        return {"success": True, "data": task.to_dict()}

    async def aclose(self) -> None:
        await self._runner.aclose()


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
