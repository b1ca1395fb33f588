"""
AI Overview

Decides per query whether to summarize, runs the summarization in the
background, and serves its result through consume-once polling.

Key Components:
- OverviewTrigger: intent classifier + structural heuristics
- AITaskRegistry: lock-protected pending/completed/failed task store
- OverviewTaskRunner: fire-and-forget execution against a Summarizer
"""

from __future__ import annotations

from search_fusion.application.overview.runner import OverviewTaskRunner, Summarizer, build_prompt
from search_fusion.application.overview.task_registry import AITaskRegistry, new_task_id
from search_fusion.application.overview.tokenizer import QueryTokenizer, detect_language
from search_fusion.application.overview.trigger import OverviewTrigger, QueryFeatures, TriggerDecision

__all__ = [
    "OverviewTaskRunner",
    "Summarizer",
    "build_prompt",
    "AITaskRegistry",
    "new_task_id",
    "QueryTokenizer",
    "detect_language",
    "OverviewTrigger",
    "QueryFeatures",
    "TriggerDecision",
]
