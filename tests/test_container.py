"""Tests for DI container, settings and application lifecycle."""

from __future__ import annotations

from dependency_injector import providers

from search_fusion.application.search.service import SearchService
from search_fusion.config import Settings
from search_fusion.container import ApplicationContainer, create_container, shutdown_container
from search_fusion.infrastructure.cache.response_cache import ResponseCache
from search_fusion.infrastructure.llm.chat_client import DEFAULT_MODEL, ChatCompletionClient
from search_fusion.infrastructure.providers.brave import BraveSearchProvider
from search_fusion.infrastructure.providers.google import GoogleSearchProvider

# ============================================================================
# Settings
# ============================================================================


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.provider_timeout == 5.0
        assert settings.cache_ttl == 7200.0
        assert settings.cache_max_size == 1000
        assert settings.llm_model == DEFAULT_MODEL
        assert settings.api_port == 8765

    def test_reads_environment(self):
        settings = Settings.from_env(
            {
                "GOOGLE_API_KEY": "g1,g2",
                "GOOGLE_SEARCH_ENGINE_ID": "cx",
                "BRAVE_API_KEY": "b1",
                "LLM_API_KEY": "sk",
                "PROVIDER_TIMEOUT": "2.5",
                "CACHE_TTL": "60",
                "SEARCH_API_PORT": "9000",
            }
        )
        assert settings.google_api_key == "g1,g2"
        assert settings.provider_timeout == 2.5
        assert settings.cache_ttl == 60.0
        assert settings.api_port == 9000

    def test_gemini_key_alias(self):
        assert Settings.from_env({"GEMINI_API_KEY": "gm"}).llm_api_key == "gm"

    def test_invalid_number_uses_default(self):
        assert Settings.from_env({"PROVIDER_TIMEOUT": "soon"}).provider_timeout == 5.0

    def test_describe_hides_secrets(self):
        described = Settings(google_api_key="secret-g", google_search_engine_id="cx", llm_api_key="secret-l").describe()
        assert described["google"] == "configured"
        assert described["brave"] == "not configured"
        assert "secret" not in str(described)


# ============================================================================
# DI Container Tests
# ============================================================================


def configured_container(**overrides) -> ApplicationContainer:
    settings = Settings(
        google_api_key="g-key",
        google_search_engine_id="cx",
        brave_api_key="",
        llm_api_key="sk",
        **overrides,
    )
    return create_container(settings)


class TestApplicationContainer:
    """Test the DI container manages services correctly."""

    def test_config_loaded(self):
        container = configured_container(provider_timeout=3.0)
        assert container.config.google_api_key() == "g-key"
        assert container.config.provider_timeout() == 3.0

    def test_providers_built_from_config(self):
        container = configured_container()
        google, brave = container.search_providers()
        assert isinstance(google, GoogleSearchProvider)
        assert isinstance(brave, BraveSearchProvider)
        assert google.is_configured()
        assert not brave.is_configured()

    def test_singletons(self):
        container = configured_container()
        assert container.response_cache() is container.response_cache()
        assert container.task_registry() is container.task_registry()
        assert container.google() is container.search_providers()[0]

    def test_cache_settings(self):
        container = configured_container(cache_ttl=30.0, cache_max_size=5)
        cache = container.response_cache()
        assert isinstance(cache, ResponseCache)
        assert cache.default_ttl == 30.0

    def test_summarizer(self):
        summarizer = configured_container().summarizer()
        assert isinstance(summarizer, ChatCompletionClient)
        assert summarizer.is_configured()

    def test_search_service_wiring(self, overview_trigger):
        container = configured_container()
        container.overview_trigger.override(providers.Object(overview_trigger))

        service = container.search_service()

        assert isinstance(service, SearchService)
        assert container.overview_runner().registry is container.task_registry()

    def test_override_provider(self, fake_summarizer):
        """Container supports provider overriding for tests."""
        container = configured_container()
        container.summarizer.override(providers.Object(fake_summarizer))
        assert container.overview_runner().is_enabled
        assert container.summarizer() is fake_summarizer
        container.summarizer.reset_override()

    async def test_shutdown_closes_clients(self, overview_trigger):
        container = configured_container()
        container.overview_trigger.override(providers.Object(overview_trigger))
        google = container.google()
        container.search_service()
        container.response_cache().set("key", {"items": []})

        await shutdown_container(container)

        assert google._client.is_closed
        assert container.summarizer()._client.is_closed
        assert len(container.response_cache()) == 0

    def test_create_container_from_environment(self, monkeypatch):
        monkeypatch.setenv("BRAVE_API_KEY", "env-brave")
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        container = create_container()
        assert container.brave().is_configured()
        assert not container.google().is_configured()
