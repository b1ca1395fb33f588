"""
AITask - Lifecycle record of one background AI overview.

State machine:
    pending ──► completed
       │
       └────► failed

Both terminal states are final. The registry hands a terminal task out
exactly once and forgets it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

AI_SOURCE = "generic-ai"


class TaskStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.PENDING


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class AITask:
    """One AI overview request tracked by the registry."""

    task_id: str
    query: str
    status: TaskStatus = TaskStatus.PENDING
    result: str | None = None
    error: str | None = None
    source: str = AI_SOURCE
    created_at: int = field(default_factory=_now_ms)
    completed_at: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> dict[str, Any]:
        """Poll response payload."""
        data: dict[str, Any] = {
            "taskId": self.task_id,
            "query": self.query,
            "source": self.source,
            "status": self.status.value,
            "generatedAt": self.completed_at or self.created_at,
        }
        if self.status is TaskStatus.COMPLETED:
            data["result"] = {"aiOverview": self.result}
        elif self.status is TaskStatus.FAILED:
            data["error"] = self.error
        return data
