"""Fixed-size asyncio worker pool with a bounded result channel."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar

import structlog

log = structlog.get_logger("pkghealth.pool")

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_POOL_SIZE = 10

_DONE = object()


class _Failed(Generic[T]):
    __slots__ = ("item", "error")

    def __init__(self, item: T, error: Exception) -> None:
        self.item = item
        self.error = error


class WorkerPool:
    """Run an async handler over items with at most *size* in flight.

    Workers pull from a task queue and publish to a result queue of the same
    capacity. A handler exception drops only that item: it is passed to
    ``on_error`` (or logged) and the remaining items keep running. Result
    order follows completion order.
    """

    def __init__(self, size: int = DEFAULT_POOL_SIZE) -> None:
        if size < 1:
            raise ValueError("pool size must be at least 1")
        self.size = size

    async def map(
        self,
        handler: Callable[[T], Awaitable[R]],
        items: Iterable[T],
        on_error: Callable[[T, Exception], None] | None = None,
    ) -> list[R]:
        tasks: asyncio.Queue[T] = asyncio.Queue()
        for item in items:
            tasks.put_nowait(item)
        if tasks.empty():
            return []

        results: asyncio.Queue[object] = asyncio.Queue(maxsize=self.size)
        worker_count = min(self.size, tasks.qsize())

        async def _worker() -> None:
            try:
                while True:
                    try:
                        item = tasks.get_nowait()
                    except asyncio.QueueEmpty:
                        return
                    try:
                        outcome: object = await handler(item)
                    except Exception as exc:
                        outcome = _Failed(item, exc)
                    await results.put(outcome)
            finally:
                await results.put(_DONE)

        workers = [asyncio.create_task(_worker()) for _ in range(worker_count)]

        collected: list[R] = []
        finished = 0
        while finished < worker_count:
            outcome = await results.get()
            if outcome is _DONE:
                finished += 1
            elif isinstance(outcome, _Failed):
                if on_error is not None:
                    on_error(outcome.item, outcome.error)
                else:
                    log.warning("pool.task_failed", item=repr(outcome.item), error=str(outcome.error))
            else:
                collected.append(outcome)  # type: ignore[arg-type]

        await asyncio.gather(*workers)
        return collected
