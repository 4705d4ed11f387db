"""Tests for the bounded worker pool."""

from __future__ import annotations

import asyncio

import pytest

from pkghealth.pool import WorkerPool


class TestWorkerPool:
    def test_size_must_be_positive(self):
        with pytest.raises(ValueError):
            WorkerPool(0)

    @pytest.mark.anyio()
    async def test_empty_input(self):
        async def handler(item):
            raise AssertionError("never called")

        assert await WorkerPool(3).map(handler, []) == []

    @pytest.mark.anyio()
    async def test_all_results_collected(self):
        async def double(item: int) -> int:
            await asyncio.sleep(0)
            return item * 2

        results = await WorkerPool(3).map(double, range(10))
        assert sorted(results) == [n * 2 for n in range(10)]

    @pytest.mark.anyio()
    async def test_in_flight_never_exceeds_size(self):
        in_flight = 0
        peak = 0

        async def handler(item: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return item

        await WorkerPool(2).map(handler, range(8))
        assert peak == 2

    @pytest.mark.anyio()
    async def test_failure_drops_only_that_item(self):
        failed = []

        async def handler(item: int) -> int:
            if item == 3:
                raise RuntimeError("boom")
            return item

        results = await WorkerPool(4).map(
            handler, range(6), on_error=lambda item, exc: failed.append((item, str(exc)))
        )

        assert sorted(results) == [0, 1, 2, 4, 5]
        assert failed == [(3, "boom")]

    @pytest.mark.anyio()
    async def test_failure_without_callback_is_logged(self):
        async def handler(item: int) -> int:
            raise ValueError("nope")

        assert await WorkerPool(2).map(handler, [1, 2]) == []

    @pytest.mark.anyio()
    async def test_results_follow_completion_order(self):
        async def handler(item: float) -> float:
            await asyncio.sleep(item)
            return item

        assert await WorkerPool(3).map(handler, [0.03, 0.0, 0.015]) == [0.0, 0.015, 0.03]
