"""Language-model backends used for AI overviews."""

from __future__ import annotations

from search_fusion.infrastructure.llm.chat_client import ChatCompletionClient

__all__ = ["ChatCompletionClient"]
