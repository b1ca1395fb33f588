"""Tests for background AI overview execution."""

from __future__ import annotations

import asyncio

import pytest
from conftest import FakeSummarizer

from search_fusion.application.overview.runner import OverviewTaskRunner, build_prompt
from search_fusion.application.overview.task_registry import AITaskRegistry
from search_fusion.core.exceptions import DuplicateTaskError, ProviderTimeoutError
from search_fusion.domain.entities.ai_task import TaskStatus


def make_runner(summarizer: FakeSummarizer) -> OverviewTaskRunner:
    return OverviewTaskRunner(AITaskRegistry(), summarizer)


class TestPrompt:
    def test_query_embedded(self):
        prompt = build_prompt("量子计算")
        assert "「量子计算」" in prompt
        assert "numbered points" in prompt


class TestSubmit:
    async def test_pending_before_return(self):
        runner = make_runner(FakeSummarizer(hold=True))
        task_id = runner.submit("what is rust")

        assert runner.registry.poll(task_id).status is TaskStatus.PENDING
        assert runner.inflight_count == 1
        runner._summarizer.release.set()
        await runner.aclose()

    async def test_completes_in_background(self):
        summarizer = FakeSummarizer(reply="1. Rust is a language")
        runner = make_runner(summarizer)
        task_id = runner.submit("what is rust")

        await runner.aclose()

        task = runner.registry.poll(task_id)
        assert task.status is TaskStatus.COMPLETED
        assert task.result == "1. Rust is a language"
        assert summarizer.prompts == [build_prompt("what is rust")]
        assert runner.inflight_count == 0

    async def test_failure_recorded(self):
        runner = make_runner(FakeSummarizer(error=ProviderTimeoutError("llm", 60.0)))
        task_id = runner.submit("q")
        await runner.aclose()

        task = runner.registry.poll(task_id)
        assert task.status is TaskStatus.FAILED
        assert "timed out" in task.error

    async def test_unconfigured_summarizer_fails_task(self):
        runner = make_runner(FakeSummarizer(configured=False))
        assert not runner.is_enabled
        task_id = runner.submit("q")
        await runner.aclose()
        assert "API key" in runner.registry.poll(task_id).error

    async def test_explicit_task_id(self):
        runner = make_runner(FakeSummarizer())
        assert runner.submit("q", task_id="fixed-id") == "fixed-id"
        with pytest.raises(DuplicateTaskError):
            runner.submit("q", task_id="fixed-id")
        await runner.aclose()

    async def test_cancellation_marks_failed(self):
        runner = make_runner(FakeSummarizer(hold=True))
        task_id = runner.submit("q")
        await asyncio.sleep(0)

        (task,) = runner._inflight
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        assert runner.registry.poll(task_id).status is TaskStatus.FAILED

    async def test_many_tasks_run_concurrently(self):
        summarizer = FakeSummarizer(hold=True)
        runner = make_runner(summarizer)
        ids = [runner.submit(f"q{i}") for i in range(5)]
        await asyncio.sleep(0)

        assert runner.registry.pending_count() == 5
        summarizer.release.set()
        await runner.aclose()
        assert all(runner.registry.poll(i).status is TaskStatus.COMPLETED for i in ids)
