"""Single-writer access to a TransitionEngine.

Operations submitted from any number of tasks are executed one at a time
by a single consumer task, and each result comes back together with the
engine snapshot it produced.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import Any

from modeflow.transition.engine import EngineSnapshot, TransitionEngine

logger = logging.getLogger(__name__)

_OPERATIONS = frozenset({
    "start_task",
    "update_files",
    "complete_current_task",
    "force_transition",
    "reset",
})


@dataclass
class _Job:
    operation: str
    args: tuple[Any, ...]
    future: asyncio.Future[tuple[Any, EngineSnapshot]] = field(repr=False)


class EngineQueue:
    """Serializes engine operations through an asyncio queue.

    Example:
        >>> queue = EngineQueue(engine)
        >>> await queue.start()
        >>> result, snapshot = await queue.submit_with_snapshot("start_task", "fix bug")
        >>> await queue.stop()
    """

    def __init__(self, engine: TransitionEngine) -> None:
        self.engine = engine
        self._queue: asyncio.Queue[_Job] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._current: _Job | None = None
        self._running = False

    async def start(self) -> None:
        """Start the consumer task."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the consumer; in-flight and pending jobs are cancelled."""
        self._running = False
        if self._current is not None and not self._current.future.done():
            self._current.future.cancel()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        while not self._queue.empty():
            job = self._queue.get_nowait()
            if not job.future.done():
                job.future.cancel()

    @property
    def is_running(self) -> bool:
        return self._running

    async def submit_with_snapshot(
        self, operation: str, *args: Any
    ) -> tuple[Any, EngineSnapshot]:
        """Enqueue an engine operation and wait for it to run.

        Args:
            operation: One of start_task, update_files, complete_current_task,
                force_transition or reset
            *args: Positional arguments for the operation

        Returns:
            The operation's result and the engine snapshot right after it

        Raises:
            ValueError: for an unknown operation
            RuntimeError: if the queue is not running
        """
        if operation not in _OPERATIONS:
            raise ValueError(f"Unknown engine operation: {operation}")
        if not self._running:
            raise RuntimeError("EngineQueue is not running")

        future: asyncio.Future[tuple[Any, EngineSnapshot]] = (
            asyncio.get_running_loop().create_future()
        )
        await self._queue.put(_Job(operation, args, future))
        return await future

    async def submit(self, operation: str, *args: Any) -> Any:
        result, _ = await self.submit_with_snapshot(operation, *args)
        return result

    async def _run(self) -> None:
        while self._running:
            job = await self._queue.get()
            self._current = job
            try:
                await self._execute(job)
            finally:
                self._current = None
                self._queue.task_done()

    async def _execute(self, job: _Job) -> None:
        if job.future.cancelled():
            return

        method = getattr(self.engine, job.operation)
        try:
            result = method(*job.args)
            if asyncio.iscoroutine(result):
                result = await result
        except asyncio.CancelledError:
            if not job.future.done():
                job.future.cancel()
            raise
        except Exception as e:
            logger.debug("Engine operation %s failed: %s", job.operation, e)
            if not job.future.done():
                job.future.set_exception(e)
            return

        if not job.future.done():
            job.future.set_result((result, self.engine.snapshot()))
