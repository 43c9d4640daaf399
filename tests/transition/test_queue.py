"""Tests for the serialized engine queue."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from modeflow.core.errors import NoActiveContextError
from modeflow.modes.types import ModeConfig
from modeflow.transition.engine import TransitionEngine, TransitionEvent
from modeflow.transition.queue import EngineQueue


@pytest_asyncio.fixture
async def queue(scenario_modes: list[ModeConfig]) -> AsyncIterator[EngineQueue]:
    engine_queue = EngineQueue(TransitionEngine(scenario_modes))
    await engine_queue.start()
    yield engine_queue
    await engine_queue.stop()


class TestEngineQueue:
    @pytest.mark.asyncio
    async def test_result_with_snapshot(self, queue: EngineQueue) -> None:
        result, snapshot = await queue.submit_with_snapshot("start_task", "implement x")

        assert result.slug == "code"
        assert snapshot.current_slug == "code"
        assert snapshot.context.current_task == "implement x"

    @pytest.mark.asyncio
    async def test_operations_run_in_submission_order(self, queue: EngineQueue) -> None:
        first, second = await asyncio.gather(
            queue.submit_with_snapshot("start_task", "implement x"),
            queue.submit_with_snapshot("force_transition", "architect"),
        )

        assert first[1].current_slug == "code"
        assert second[0] is True
        assert second[1].current_slug == "architect"
        assert second[1].context.handoff_queue == ["code"]

    @pytest.mark.asyncio
    async def test_sync_operation(self, queue: EngineQueue) -> None:
        await queue.submit("start_task", "implement x")

        result, snapshot = await queue.submit_with_snapshot("reset")

        assert result is None
        assert snapshot.current_mode is None
        assert snapshot.context is None

    @pytest.mark.asyncio
    async def test_errors_reach_submitter(self, queue: EngineQueue) -> None:
        with pytest.raises(NoActiveContextError):
            await queue.submit("update_files", ["a.md"])

        # the consumer survives a failed operation
        assert await queue.submit("force_transition", "ghost") is False

    @pytest.mark.asyncio
    async def test_unknown_operation(self, queue: EngineQueue) -> None:
        with pytest.raises(ValueError, match="Unknown engine operation"):
            await queue.submit("dispose")

    @pytest.mark.asyncio
    async def test_not_running(self, scenario_modes: list[ModeConfig]) -> None:
        engine_queue = EngineQueue(TransitionEngine(scenario_modes))

        with pytest.raises(RuntimeError, match="not running"):
            await engine_queue.submit("reset")

    @pytest.mark.asyncio
    async def test_stop(self, queue: EngineQueue) -> None:
        await queue.stop()

        assert queue.is_running is False
        with pytest.raises(RuntimeError):
            await queue.submit("reset")

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_operation(
        self, scenario_modes: list[ModeConfig]
    ) -> None:
        started = asyncio.Event()

        async def blocking(event: TransitionEvent) -> None:
            started.set()
            await asyncio.Event().wait()

        engine_queue = EngineQueue(TransitionEngine(scenario_modes, on_transition=blocking))
        await engine_queue.start()
        submitter = asyncio.create_task(engine_queue.submit("start_task", "implement x"))
        await asyncio.wait_for(started.wait(), timeout=1.0)

        await engine_queue.stop()
        done, _ = await asyncio.wait({submitter}, timeout=1.0)

        assert submitter in done
        assert submitter.cancelled()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, queue: EngineQueue) -> None:
        await queue.start()

        assert queue.is_running
        assert await queue.submit("reset") is None
