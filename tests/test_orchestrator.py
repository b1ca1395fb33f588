"""Tests for the fan-out orchestrator."""

from __future__ import annotations

import asyncio
import logging

import pytest
from conftest import FakeProvider, make_result

from search_fusion.application.search.orchestrator import FanOutOrchestrator
from search_fusion.core.exceptions import ConfigurationError, ProviderHttpError


class TestConfiguration:
    def test_provider_names_include_unconfigured(self):
        orch = FanOutOrchestrator([FakeProvider("google"), FakeProvider("brave", configured=False)])
        assert orch.provider_names == ["google", "brave"]
        assert [p.name for p in orch.configured_providers()] == ["google"]
        assert orch.has_configured_providers

    def test_no_configured_providers(self):
        orch = FanOutOrchestrator([FakeProvider("google", configured=False)])
        assert not orch.has_configured_providers


class TestRun:
    async def test_all_succeed(self, web_query, google_results, brave_results):
        google = FakeProvider("google", google_results, total_results="1000")
        brave = FakeProvider("brave", brave_results)
        outcomes = await FanOutOrchestrator([google, brave]).run(web_query)

        assert [o.provider for o in outcomes] == ["google", "brave"]
        assert all(o.succeeded for o in outcomes)
        assert len(outcomes[0].results) == 3
        assert outcomes[0].total_results == "1000"
        assert google.calls == [web_query]

    async def test_unconfigured_provider_not_called(self, web_query):
        brave = FakeProvider("brave", configured=False)
        outcomes = await FanOutOrchestrator([FakeProvider("google"), brave]).run(web_query)
        assert [o.provider for o in outcomes] == ["google"]
        assert brave.calls == []

    async def test_failing_provider_is_isolated(self, web_query, brave_results):
        google = FakeProvider("google", error=ProviderHttpError(500, "boom", provider="google"))
        brave = FakeProvider("brave", brave_results)
        outcomes = await FanOutOrchestrator([google, brave]).run(web_query)

        failed, ok = outcomes
        assert failed.results == []
        assert "500" in failed.error
        assert failed.timing is None
        assert ok.succeeded
        assert len(ok.results) == 2

    async def test_failure_logged_with_error_details(self, web_query, caplog):
        google = FakeProvider("google", error=ProviderHttpError(503, "down", provider="google"))
        with caplog.at_level(logging.WARNING, logger="search_fusion.application.search.orchestrator"):
            await FanOutOrchestrator([google]).run(web_query)

        assert "[google] degraded to empty results" in caplog.text
        assert "'category': 'provider'" in caplog.text
        assert "'provider': 'google'" in caplog.text

    async def test_timeout_degrades_provider(self, web_query, brave_results):
        google = FakeProvider("google", [make_result("https://late.com", 1)], delay=5.0)
        brave = FakeProvider("brave", brave_results)

        loop = asyncio.get_running_loop()
        started = loop.time()
        outcomes = await FanOutOrchestrator([google, brave], timeout=0.1).run(web_query)
        elapsed = loop.time() - started

        assert elapsed < 1.0
        assert outcomes[0].results == []
        assert "timed out" in outcomes[0].error
        assert outcomes[1].succeeded

    async def test_providers_run_concurrently(self, web_query):
        providers = [FakeProvider(f"p{i}", delay=0.2) for i in range(3)]

        loop = asyncio.get_running_loop()
        started = loop.time()
        await FanOutOrchestrator(providers, timeout=1.0).run(web_query)
        assert loop.time() - started < 0.5

    async def test_nothing_configured_and_no_ai_raises(self, web_query):
        orch = FanOutOrchestrator([FakeProvider("google", configured=False)])
        with pytest.raises(ConfigurationError):
            await orch.run(web_query)

    async def test_nothing_configured_with_ai_returns_empty(self, web_query):
        orch = FanOutOrchestrator([FakeProvider("google", configured=False)])
        assert await orch.run(web_query, ai_triggered=True) == []
