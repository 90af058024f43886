"""
Tests for ordered execution with bounded concurrency.
"""

import asyncio
from contextlib import aclosing

import pytest

from video_thumbnailer.executor import ExecutionResult, OrderedExecutor


async def collect(executor, worker, items):
    return [result async for result in executor.map(worker, items)]


class TestExecutionResult:
    """Test ExecutionResult."""

    def test_success(self):
        """Test success flag."""
        assert ExecutionResult(item=1, value="a").success
        assert not ExecutionResult(item=1, error=RuntimeError("x")).success


class TestOrderedExecutor:
    """Test OrderedExecutor."""

    def test_invalid_concurrency(self):
        """Test concurrency must be positive."""
        with pytest.raises(ValueError):
            OrderedExecutor(max_concurrency=0)

    @pytest.mark.asyncio
    async def test_sequential_runs_one_at_a_time(self):
        """Test sequential mode never overlaps workers."""
        running = 0
        peak = 0

        async def worker(item):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return item * 2

        results = await collect(OrderedExecutor(), worker, [1, 2, 3])

        assert [r.value for r in results] == [2, 4, 6]
        assert peak == 1

    @pytest.mark.asyncio
    async def test_concurrent_results_keep_item_order(self):
        """Test slow early items do not reorder emission."""
        delays = {0: 0.2, 1: 0.05, 2: 0.0, 3: 0.1}
        finished: list[int] = []

        async def worker(item):
            await asyncio.sleep(delays[item])
            finished.append(item)
            return item

        results = await collect(OrderedExecutor(max_concurrency=4), worker, [0, 1, 2, 3])

        assert [r.item for r in results] == [0, 1, 2, 3]
        assert finished != [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        """Test no more than max_concurrency workers run at once."""
        running = 0
        peak = 0

        async def worker(item):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.02)
            running -= 1
            return item

        results = await collect(OrderedExecutor(max_concurrency=2), worker, range(8))

        assert len(results) == 8
        assert peak == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrency", [1, 3])
    async def test_errors_are_captured_per_item(self, concurrency):
        """Test one failing item does not stop the others."""

        async def worker(item):
            if item == 1:
                raise RuntimeError("bad item")
            return item

        results = await collect(OrderedExecutor(concurrency), worker, [0, 1, 2])

        assert [r.success for r in results] == [True, False, True]
        assert isinstance(results[1].error, RuntimeError)
        assert results[2].value == 2

    @pytest.mark.asyncio
    async def test_closing_early_cancels_pending_tasks(self):
        """Test abandoning the iterator cancels outstanding work."""
        cancelled: list[int] = []

        async def worker(item):
            try:
                await asyncio.sleep(0 if item == 0 else 10)
            except asyncio.CancelledError:
                cancelled.append(item)
                raise
            return item

        executor = OrderedExecutor(max_concurrency=3)
        async with aclosing(executor.map(worker, [0, 1, 2])) as results:
            async for result in results:
                assert result.item == 0
                break

        assert sorted(cancelled) == [1, 2]
        assert not executor._active_tasks
