"""
Application DI Container (dependency-injector).

Owns every long-lived service: provider adapters, response cache, AI task
registry, trigger classifier and the search service. Lifecycles are scoped
to the container, not to module globals.

Usage::

    from search_fusion.config import Settings
    from search_fusion.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(Settings.from_env().to_dict())

    service = container.search_service()

    # In tests, override any provider:
    container.summarizer.override(providers.Object(fake_summarizer))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_google(api_key: str, search_engine_id: str, timeout: float) -> object:
    """Lazy factory for GoogleSearchProvider (avoids top-level import)."""
    from search_fusion.infrastructure.providers.google import GoogleSearchProvider

    return GoogleSearchProvider(api_key, search_engine_id, timeout=timeout)


def _create_brave(api_key: str, timeout: float) -> object:
    """Lazy factory for BraveSearchProvider."""
    from search_fusion.infrastructure.providers.brave import BraveSearchProvider

    return BraveSearchProvider(api_key, timeout=timeout)


def _create_suggestion_client() -> object:
    from search_fusion.infrastructure.providers.suggest import SuggestionClient

    return SuggestionClient()


def _create_image_proxy() -> object:
    from search_fusion.infrastructure.providers.image_proxy import ImageProxyClient

    return ImageProxyClient()


def _create_summarizer(api_key: str, base_url: str, model: str) -> object:
    """Lazy factory for the chat-completions client."""
    from search_fusion.infrastructure.llm.chat_client import ChatCompletionClient

    return ChatCompletionClient(api_key, base_url=base_url, model=model)


def _create_response_cache(max_size: int, ttl: float) -> object:
    from search_fusion.infrastructure.cache.response_cache import ResponseCache

    return ResponseCache(max_size=int(max_size), ttl=ttl)


def _create_task_registry() -> object:
    from search_fusion.application.overview.task_registry import AITaskRegistry

    return AITaskRegistry()


def _create_trigger() -> object:
    """Trains the intent classifier; built once per container."""
    from search_fusion.application.overview.trigger import OverviewTrigger

    return OverviewTrigger()


def _create_runner(registry: object, summarizer: object) -> object:
    from search_fusion.application.overview.runner import OverviewTaskRunner

    return OverviewTaskRunner(registry=registry, summarizer=summarizer)  # type: ignore[arg-type]


def _create_orchestrator(search_providers: list, timeout: float) -> object:
    from search_fusion.application.search.orchestrator import FanOutOrchestrator

    return FanOutOrchestrator(search_providers, timeout=timeout)


def _create_search_service(
    orchestrator: object,
    cache: object,
    trigger: object,
    runner: object,
    cache_ttl: float,
) -> object:
    from search_fusion.application.search.service import SearchService

    return SearchService(
        orchestrator=orchestrator,  # type: ignore[arg-type]
        cache=cache,  # type: ignore[arg-type]
        trigger=trigger,  # type: ignore[arg-type]
        runner=runner,  # type: ignore[arg-type]
        cache_ttl=cache_ttl,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Search Fusion.

    - ``search_providers``: Google CSE + Brave adapters
    - ``response_cache``: TTL cache of aggregated responses
    - ``task_registry`` / ``overview_runner``: background AI overviews
    - ``search_service``: request path used by the HTTP API
    """

    config = providers.Configuration()

    google = providers.Singleton(
        _create_google,
        api_key=config.google_api_key,
        search_engine_id=config.google_search_engine_id,
        timeout=config.provider_timeout,
    )

    brave = providers.Singleton(
        _create_brave,
        api_key=config.brave_api_key,
        timeout=config.provider_timeout,
    )

    search_providers = providers.List(google, brave)

    suggestion_client = providers.Singleton(_create_suggestion_client)

    image_proxy = providers.Singleton(_create_image_proxy)

    summarizer = providers.Singleton(
        _create_summarizer,
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        model=config.llm_model,
    )

    response_cache = providers.Singleton(
        _create_response_cache,
        max_size=config.cache_max_size,
        ttl=config.cache_ttl,
    )

    task_registry = providers.Singleton(_create_task_registry)

    overview_trigger = providers.Singleton(_create_trigger)

    overview_runner = providers.Singleton(
        _create_runner,
        registry=task_registry,
        summarizer=summarizer,
    )

    orchestrator = providers.Singleton(
        _create_orchestrator,
        search_providers=search_providers,
        timeout=config.provider_timeout,
    )

    search_service = providers.Singleton(
        _create_search_service,
        orchestrator=orchestrator,
        cache=response_cache,
        trigger=overview_trigger,
        runner=overview_runner,
        cache_ttl=config.cache_ttl,
    )


def create_container(settings: object | None = None) -> ApplicationContainer:
    """Container configured from ``settings`` (environment when omitted)."""
    from search_fusion.config import Settings

    resolved = settings if isinstance(settings, Settings) else Settings.from_env()
    container = ApplicationContainer()
    container.config.from_dict(resolved.to_dict())
    logger.info(f"Container configured: {resolved.describe()}")
    return container


async def shutdown_container(container: ApplicationContainer) -> None:
    """Drain background tasks, close outbound HTTP clients and drop cached responses."""
    await container.overview_runner().aclose()
    for provider in container.search_providers():
        await provider.aclose()
    await container.summarizer().aclose()
    await container.suggestion_client().aclose()
    await container.image_proxy().aclose()
    dropped = container.response_cache().clear()
    logger.info(f"Container shut down, {dropped} cached responses dropped")


__all__ = ["ApplicationContainer", "create_container", "shutdown_container"]
