"""
AITaskRegistry - Concurrent store of background AI overview tasks.

Written by the request path (``create``) and by background summarization
(``complete`` / ``fail``); read by later polls. Every operation runs under
one lock, so a terminal write is visible to any poll that follows it and a
terminal task is handed out exactly once.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import threading
import time

from search_fusion.core.exceptions import DuplicateTaskError
from search_fusion.domain.entities.ai_task import AI_SOURCE, AITask, TaskStatus

logger = logging.getLogger(__name__)


def new_task_id(prefix: str = AI_SOURCE) -> str:
    """Time + random derived task identifier, e.g. ``generic-ai-1718000000000-4821``."""
    return f"{prefix}-{int(time.time() * 1000)}-{random.randrange(100000)}"


class AITaskRegistry:
    """
    Lock-protected map of task id → AITask.

    Lifecycle is owned by whoever creates the registry (the application
    container), not by module state.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, AITask] = {}
        self._lock = threading.Lock()

    def create(self, task_id: str, query: str) -> AITask:
        """
        Register a new pending task.

        Raises:
            DuplicateTaskError: ``task_id`` is already registered.
        """
        with self._lock:
            if task_id in self._tasks:
                raise DuplicateTaskError(task_id)
            task = AITask(task_id=task_id, query=query)
            self._tasks[task_id] = task
            return dataclasses.replace(task)

    def complete(self, task_id: str, result: str) -> bool:
        """Move a pending task to ``completed``. False if it was not pending."""
        return self._finish(task_id, TaskStatus.COMPLETED, result=result)

    def fail(self, task_id: str, error: str) -> bool:
        """Move a pending task to ``failed``. False if it was not pending."""
        return self._finish(task_id, TaskStatus.FAILED, error=error)

    def _finish(
        self,
        task_id: str,
        status: TaskStatus,
        *,
        result: str | None = None,
        error: str | None = None,
    ) -> bool:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                logger.warning(f"[AI Task {task_id}] cannot mark {status.value}: task not found")
                return False
            if task.is_terminal:
                logger.warning(
                    f"[AI Task {task_id}] cannot mark {status.value}: already {task.status.value}"
                )
                return False

            task.status = status
            task.result = result
            task.error = error
            task.completed_at = int(time.time() * 1000)
            return True

    def poll(self, task_id: str) -> AITask | None:
        """
        Current state of a task.

        A terminal task is removed in the same critical section that reads
        it, so only the first poll after completion sees the result. Pending
        tasks stay registered. Unknown ids return None.
        """
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            if task.is_terminal:
                del self._tasks[task_id]
            return dataclasses.replace(task)

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for t in self._tasks.values() if not t.is_terminal)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._tasks
