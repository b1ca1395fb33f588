"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from search_fusion.domain.entities.query import SearchQuery
from search_fusion.domain.entities.result import ProviderPage, ProviderResult
from search_fusion.infrastructure.providers.base import SearchProvider

# ============================================================
# Result Builders
# ============================================================


def make_result(
    link: str | None,
    rank: int,
    source: str = "google",
    title: str | None = None,
    snippet: str = "",
    context_link: str | None = None,
    thumbnail_link: str | None = None,
) -> ProviderResult:
    return ProviderResult(
        title=title if title is not None else f"{source} #{rank}",
        snippet=snippet,
        link=link,
        original_rank=rank,
        source=source,
        context_link=context_link,
        thumbnail_link=thumbnail_link,
    )


@pytest.fixture
def google_results() -> list[ProviderResult]:
    """Three ranked Google hits; the first overlaps with Brave."""
    return [
        make_result("https://www.example.com/a", 1, "google", "Example A", "short"),
        make_result("https://google-only.com/b", 2, "google", "Google B", "google snippet"),
        make_result("https://shared.org/c/", 3, "google", "Shared C", "c"),
    ]


@pytest.fixture
def brave_results() -> list[ProviderResult]:
    return [
        make_result("https://example.com/a?utm=1", 1, "brave", "Example A (brave)", "a much longer snippet"),
        make_result("https://brave-only.net/d", 2, "brave", "Brave D", "brave snippet"),
    ]


@pytest.fixture
def web_query() -> SearchQuery:
    return SearchQuery("python asyncio")


# ============================================================
# Fake Providers / Summarizer
# ============================================================


class FakeProvider(SearchProvider):
    """In-memory provider with configurable latency and failure."""

    def __init__(
        self,
        name: str,
        results: list[ProviderResult] | None = None,
        *,
        configured: bool = True,
        delay: float = 0.0,
        error: Exception | None = None,
        total_results: str | None = None,
    ) -> None:
        self.name = name
        self.results = results or []
        self.configured = configured
        self.delay = delay
        self.error = error
        self.total_results = total_results
        self.calls: list[SearchQuery] = []
        self.closed = False

    def is_configured(self) -> bool:
        return self.configured

    async def search(self, query: SearchQuery) -> ProviderPage:
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ProviderPage(
            results=list(self.results),
            total_results=self.total_results,
            formatted_total_results=f"About {self.total_results} results" if self.total_results else None,
        )

    async def aclose(self) -> None:
        self.closed = True


class FakeSummarizer:
    """Summarizer double; ``release`` gates completion when ``hold`` is set."""

    def __init__(
        self,
        reply: str = "1. Point one\n2. Point two",
        *,
        configured: bool = True,
        error: Exception | None = None,
        hold: bool = False,
    ) -> None:
        self.reply = reply
        self.configured = configured
        self.error = error
        self.release = asyncio.Event()
        if not hold:
            self.release.set()
        self.prompts: list[str] = []

    def is_configured(self) -> bool:
        return self.configured

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        pass


@pytest.fixture
def fake_summarizer() -> FakeSummarizer:
    return FakeSummarizer()


# ============================================================
# Classifier
# ============================================================


@pytest.fixture(scope="session")
def overview_trigger():
    """Trained once per session; ``decide`` is read-only."""
    from search_fusion.application.overview.trigger import OverviewTrigger

    return OverviewTrigger()


# ============================================================
# HTTP
# ============================================================


def json_transport(payload: Any, status_code: int = 200, requests: list[httpx.Request] | None = None):
    """MockTransport answering every request with ``payload``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)
