"""
Fan-Out Orchestrator - Concurrent, isolated provider calls.

Every configured adapter runs in parallel through ``timed_call`` with its
own deadline. A timeout, HTTP error, malformed payload or missing credential
degrades that provider to an empty list plus an error string; siblings are
unaffected and nothing is raised past ``run``. Total latency is bounded by
the slowest provider's deadline, not the sum.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from search_fusion.core.async_utils import timed_call
from search_fusion.core.exceptions import ConfigurationError, SearchFusionError
from search_fusion.domain.entities.result import ProviderOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from search_fusion.core.async_utils import TimedResult
    from search_fusion.domain.entities.query import SearchQuery
    from search_fusion.domain.entities.result import ProviderPage
    from search_fusion.infrastructure.providers.base import SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 5.0  # seconds, per provider


class FanOutOrchestrator:
    """
    Calls every configured search provider concurrently.

    Example:
        orchestrator = FanOutOrchestrator([google, brave], timeout=5.0)
        outcomes = await orchestrator.run(query)
        for outcome in outcomes:
            print(outcome.provider, outcome.timing, len(outcome.results))
    """

    def __init__(
        self,
        providers: Sequence[SearchProvider],
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> None:
        self._providers = list(providers)
        self._timeout = timeout

    @property
    def provider_names(self) -> list[str]:
        """Every registered provider, configured or not."""
        return [p.name for p in self._providers]

    def configured_providers(self) -> list[SearchProvider]:
        configured = []
        for provider in self._providers:
            if provider.is_configured():
                configured.append(provider)
            else:
                logger.warning(f"[Config] {provider.name} credentials not found, skipping {provider.name} search")
        return configured

    @property
    def has_configured_providers(self) -> bool:
        return any(p.is_configured() for p in self._providers)

    async def run(self, query: SearchQuery, *, ai_triggered: bool = False) -> list[ProviderOutcome]:
        """
        Fan ``query`` out to all configured providers and wait for all of them.

        Raises:
            ConfigurationError: no provider is configured and no AI overview
                was triggered, so there is nothing to return.
        """
        providers = self.configured_providers()
        if not providers:
            if not ai_triggered:
                raise ConfigurationError("No search provider is configured and AI overview was not triggered")
            logger.info("No search provider configured; returning AI overview only")
            return []

        timed = await asyncio.gather(
            *(timed_call(p.name, _search_call(p, query), self._timeout) for p in providers)
        )
        outcomes = [_to_outcome(result) for result in timed]

        for result, outcome in zip(timed, outcomes):
            if outcome.error:
                detail = outcome.error
                if isinstance(result.exception, SearchFusionError):
                    detail = result.exception.to_dict()
                logger.warning(f"[{outcome.provider}] degraded to empty results: {detail}")
            logger.info(f"[{outcome.provider}] time: {outcome.elapsed_ms}ms, results: {len(outcome.results)}")
        return outcomes


def _search_call(provider: SearchProvider, query: SearchQuery):
    return lambda: provider.search(query)


def _to_outcome(timed: TimedResult[ProviderPage]) -> ProviderOutcome:
    page = timed.value
    if page is None:
        return ProviderOutcome(provider=timed.name, results=[], elapsed_ms=timed.elapsed_ms, error=timed.error)
    return ProviderOutcome(
        provider=timed.name,
        results=list(page.results),
        elapsed_ms=timed.elapsed_ms,
        error=None,
        total_results=page.total_results,
        formatted_total_results=page.formatted_total_results,
    )
