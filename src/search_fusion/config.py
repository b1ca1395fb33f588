"""
Runtime settings read from the environment.

Environment Variables:
    GOOGLE_API_KEY: Comma-separated Google CSE keys
    GOOGLE_SEARCH_ENGINE_ID: Google CSE engine id (cx)
    BRAVE_API_KEY: Comma-separated Brave Search keys
    LLM_API_KEY: Comma-separated language-model keys (GEMINI_API_KEY also accepted)
    LLM_BASE_URL: OpenAI-compatible API root (default: Gemini demo gateway)
    LLM_MODEL: Chat model name (default: gemini-2.5-flash)
    PROVIDER_TIMEOUT: Per-provider deadline in seconds (default: 5)
    CACHE_TTL: Response cache TTL in seconds (default: 7200)
    CACHE_MAX_SIZE: Response cache capacity (default: 1000)
    SEARCH_API_HOST / SEARCH_API_PORT: HTTP bind address (default: 127.0.0.1:8765)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from search_fusion.infrastructure.llm.chat_client import DEFAULT_BASE_URL, DEFAULT_MODEL

logger = logging.getLogger(__name__)

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8765


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """Everything the application container needs to build services."""

    google_api_key: str = ""
    google_search_engine_id: str = ""
    brave_api_key: str = ""
    llm_api_key: str = ""
    llm_base_url: str = DEFAULT_BASE_URL
    llm_model: str = DEFAULT_MODEL
    provider_timeout: float = 5.0
    cache_ttl: float = 7200.0
    cache_max_size: int = 1000
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env
        return cls(
            google_api_key=env.get("GOOGLE_API_KEY", ""),
            google_search_engine_id=env.get("GOOGLE_SEARCH_ENGINE_ID", ""),
            brave_api_key=env.get("BRAVE_API_KEY", ""),
            llm_api_key=env.get("LLM_API_KEY") or env.get("GEMINI_API_KEY", ""),
            llm_base_url=env.get("LLM_BASE_URL") or DEFAULT_BASE_URL,
            llm_model=env.get("LLM_MODEL") or DEFAULT_MODEL,
            provider_timeout=_float(env, "PROVIDER_TIMEOUT", 5.0),
            cache_ttl=_float(env, "CACHE_TTL", 7200.0),
            cache_max_size=int(_float(env, "CACHE_MAX_SIZE", 1000)),
            api_host=env.get("SEARCH_API_HOST") or DEFAULT_API_HOST,
            api_port=int(_float(env, "SEARCH_API_PORT", DEFAULT_API_PORT)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def describe(self) -> dict[str, str]:
        """Loggable summary without secrets."""
        return {
            "google": "configured" if self.google_api_key and self.google_search_engine_id else "not configured",
            "brave": "configured" if self.brave_api_key else "not configured",
            "llm": f"{self.llm_model} (configured)" if self.llm_api_key else "not configured",
            "provider_timeout": f"{self.provider_timeout:.1f}s",
            "cache_ttl": f"{self.cache_ttl:.0f}s",
        }
