"""Tests for the FastAPI HTTP layer."""

from __future__ import annotations

import httpx
import pytest
from conftest import FakeProvider, FakeSummarizer
from dependency_injector import providers
from fastapi.testclient import TestClient

from search_fusion.api.server import IMAGE_CACHE_CONTROL, create_app
from search_fusion.config import Settings
from search_fusion.container import create_container
from search_fusion.infrastructure.providers.image_proxy import ImageProxyClient
from search_fusion.infrastructure.providers.suggest import SuggestionClient


def suggest_handler(request: httpx.Request) -> httpx.Response:
    payload = '["量子", ["量子计算", "量子力学"], [], {}]'.encode("gbk")
    return httpx.Response(200, content=payload, headers={"content-type": "text/javascript; charset=GB2312"})


def image_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "missing.example.com":
        return httpx.Response(404)
    if request.url.host == "huge.example.com":
        return httpx.Response(200, content=b"x" * 4096, headers={"content-type": "image/png"})
    return httpx.Response(200, content=b"\x89PNG...", headers={"content-type": "image/png"})


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer(reply="1. Overview")


@pytest.fixture
def container(google_results, brave_results, summarizer, overview_trigger):
    container = create_container(Settings())
    container.search_providers.override(
        providers.Object(
            [
                FakeProvider("google", google_results, delay=0.01, total_results="100"),
                FakeProvider("brave", brave_results, delay=0.01),
            ]
        )
    )
    container.summarizer.override(providers.Object(summarizer))
    container.overview_trigger.override(providers.Object(overview_trigger))
    container.suggestion_client.override(
        providers.Object(SuggestionClient(client=httpx.AsyncClient(transport=httpx.MockTransport(suggest_handler))))
    )
    container.image_proxy.override(
        providers.Object(
            ImageProxyClient(max_bytes=1024, client=httpx.AsyncClient(transport=httpx.MockTransport(image_handler)))
        )
    )
    return container


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


# ============================================================
# /health
# ============================================================


class TestHealth:
    def test_healthy(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["providers"] == {"google": True, "brave": True}
        assert data["llm_configured"] is True
        assert data["pending_tasks"] == 0
        assert data["cache_hit_rate"] == 0.0

    def test_cache_hit_rate(self, client):
        client.get("/api/search", params={"q": "go to youtube"})
        client.get("/api/search", params={"q": "go to youtube"})
        data = client.get("/health").json()
        assert data["cached_responses"] == 1
        assert data["cache_hit_rate"] == 0.5


# ============================================================
# /api/search
# ============================================================


class TestSearchEndpoint:
    def test_search(self, client):
        response = client.get("/api/search", params={"q": "go to youtube"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]["items"]) == 4
        assert body["data"]["aiTask"]["hasAI"] is False
        assert set(body["apiTimings"]) == {"google", "brave"}

    def test_missing_query_is_envelope_error(self, client):
        response = client.get("/api/search")
        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "error": "Search keywords cannot be empty",
            "totalResponseTime": response.json()["totalResponseTime"],
            "apiTimings": None,
        }

    def test_aliased_parameters(self, client, container):
        client.get("/api/search", params={"q": "cats", "type": "image", "startIndex": "11", "sort": "date"})
        query = container.search_providers()[0].calls[0]
        assert query.is_image
        assert query.start_index == 11

    def test_cached_response_has_null_timings(self, client):
        client.get("/api/search", params={"q": "go to youtube"})
        body = client.get("/api/search", params={"q": "go to youtube"}).json()
        assert body["apiTimings"] == {"google": None, "brave": None}


# ============================================================
# /api/ai-result
# ============================================================


class TestAIResultEndpoint:
    def test_missing_task_id(self, client):
        response = client.post("/api/ai-result", json={})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "taskId is required"}

    def test_missing_body(self, client):
        assert client.post("/api/ai-result").status_code == 400

    def test_unknown_task_is_pending(self, client):
        body = client.post("/api/ai-result", json={"taskId": "generic-ai-1-1"}).json()
        assert body["success"] is True
        assert body["data"]["status"] == "pending"
        assert body["data"]["message"] == "AI overview is still being generated."

    def test_search_then_poll(self, client, container):
        search = client.get("/api/search", params={"q": "how does a quantum computer work"}).json()
        task_id = search["data"]["aiTask"]["taskId"]
        assert search["data"]["aiTask"]["hasAI"] is True

        # Poll until the background task settles
        for _ in range(50):
            body = client.post("/api/ai-result", json={"taskId": task_id}).json()
            if body["data"]["status"] != "pending":
                break
        assert body["data"]["status"] == "completed"
        assert body["data"]["result"]["aiOverview"] == "1. Overview"

        # Consumed once
        again = client.post("/api/ai-result", json={"taskId": task_id}).json()
        assert again["data"]["status"] == "pending"


# ============================================================
# /api/suggest
# ============================================================


class TestSuggestEndpoint:
    def test_suggestions_decoded(self, client):
        body = client.get("/api/suggest", params={"q": "量子"}).json()
        assert body == {"success": True, "data": ["量子计算", "量子力学"], "error": None}

    def test_missing_query(self, client):
        body = client.get("/api/suggest").json()
        assert body["success"] is False
        assert body["error"] == "Search keywords cannot be empty"


# ============================================================
# /api/proxy-image
# ============================================================


class TestProxyImageEndpoint:
    def test_proxied(self, client):
        response = client.get("/api/proxy-image", params={"url": "https://img.example.com/cat.png"})
        assert response.status_code == 200
        assert response.content == b"\x89PNG..."
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == IMAGE_CACHE_CONTROL

    def test_missing_url(self, client):
        response = client.get("/api/proxy-image")
        assert response.status_code == 400
        assert response.json()["detail"] == "Image URL is required"

    def test_non_http_url(self, client):
        assert client.get("/api/proxy-image", params={"url": "file:///etc/passwd"}).status_code == 400

    def test_upstream_failure(self, client):
        response = client.get("/api/proxy-image", params={"url": "https://missing.example.com/x.png"})
        assert response.status_code == 502

    def test_oversized_upstream_rejected(self, client):
        response = client.get("/api/proxy-image", params={"url": "https://huge.example.com/big.png"})
        assert response.status_code == 502
