"""
OverviewTaskRunner - Fire-and-forget AI overview generation.

``submit`` registers a pending task synchronously, then schedules the
summarization as an asyncio task and returns the task id. The request path
never awaits it. The runner keeps strong references to in-flight tasks so
they are not garbage collected, and ``aclose`` waits for them on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from search_fusion.application.overview.task_registry import new_task_id
from search_fusion.core.exceptions import AITaskFailure

if TYPE_CHECKING:
    from search_fusion.application.overview.task_registry import AITaskRegistry

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Based on the search keywords 「{query}」, generate a structured AI overview: "
    "focus tightly on the core information of the keywords, present it as concise "
    "numbered points (point 1, point 2, ...), leave out unrelated content and do not "
    "digress. Answer in the same language as the keywords."
)


class Summarizer(Protocol):
    """Language-model backend used for overviews."""

    def is_configured(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


def build_prompt(query: str) -> str:
    return PROMPT_TEMPLATE.format(query=query)


class OverviewTaskRunner:
    """Launches background summarizations and records their outcome."""

    def __init__(self, registry: AITaskRegistry, summarizer: Summarizer) -> None:
        self._registry = registry
        self._summarizer = summarizer
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def registry(self) -> AITaskRegistry:
        return self._registry

    @property
    def is_enabled(self) -> bool:
        return self._summarizer.is_configured()

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def submit(self, query: str, task_id: str | None = None) -> str:
        """
        Register ``query`` as pending and start summarizing it.

        Must be called from a running event loop. The pending entry exists
        before this method returns.

        Raises:
            DuplicateTaskError: ``task_id`` is already registered.
        """
        task_id = task_id or new_task_id()
        self._registry.create(task_id, query)

        task = asyncio.get_running_loop().create_task(self._run(task_id, query), name=f"ai-overview-{task_id}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task_id

    async def _run(self, task_id: str, query: str) -> None:
        logger.info(f"[AI Task {task_id}] started")
        try:
            if not self._summarizer.is_configured():
                raise AITaskFailure("Language model API key is unavailable or invalid", task_id=task_id)
            content = await self._summarizer.complete(build_prompt(query))
        except asyncio.CancelledError:
            self._registry.fail(task_id, "AI overview generation was cancelled")
            raise
        except Exception as e:
            logger.error(f"[AI Task {task_id}] failed: {e}")
            self._registry.fail(task_id, str(e) or type(e).__name__)
            return

        self._registry.complete(task_id, content)
        logger.info(f"[AI Task {task_id}] completed")

    async def aclose(self) -> None:
        """Wait for every in-flight summarization to settle."""
        if self._inflight:
            logger.info(f"Waiting for {len(self._inflight)} AI overview task(s) to finish")
            await asyncio.gather(*list(self._inflight), return_exceptions=True)
