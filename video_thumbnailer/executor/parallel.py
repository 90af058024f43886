"""
Ordered task execution with bounded concurrency.

Runs one async worker per item, at most ``max_concurrency`` at a time, and
hands results back strictly in item order. Worker exceptions are captured
per item so one failure never aborts the rest.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

from ..utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ExecutionResult(Generic[T, R]):
    """Result of running the worker on one item."""

    item: T
    value: Optional[R] = None
    error: Optional[Exception] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the worker returned without raising."""
        return self.error is None


class OrderedExecutor:
    """
    Executes a worker over items and yields results in submission order.

    With ``max_concurrency == 1`` items run one after another and nothing is
    scheduled ahead. Above that, tasks are created up front and gated by a
    semaphore; a slow item holds back emission of the items after it.
    """

    def __init__(self, max_concurrency: int = 1):
        """
        Initialize executor.

        Args:
            max_concurrency: Maximum workers running at once
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.max_concurrency = max_concurrency
        self._active_tasks: set[asyncio.Task] = set()

    async def map(
        self,
        worker: Callable[[T], Awaitable[R]],
        items: Iterable[T],
    ) -> AsyncIterator[ExecutionResult[T, R]]:
        """
        Run ``worker`` on every item.

        Args:
            worker: Async callable applied to each item
            items: Items to process

        Yields:
            ExecutionResult per item, in the order of ``items``
        """
        if self.max_concurrency == 1:
            for item in items:
                yield await self._run(worker, item)
            return

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def gated(item: T) -> ExecutionResult[T, R]:
            async with semaphore:
                return await self._run(worker, item)

        tasks = [asyncio.create_task(gated(item)) for item in items]
        self._active_tasks.update(tasks)

        try:
            for task in tasks:
                yield await task
        finally:
            await self.cancel()

    async def _run(self, worker: Callable[[T], Awaitable[R]], item: T) -> ExecutionResult[T, R]:
        start = time.monotonic()
        try:
            value = await worker(item)
        except Exception as e:
            return ExecutionResult(item=item, error=e, duration=time.monotonic() - start)
        return ExecutionResult(item=item, value=value, duration=time.monotonic() - start)

    async def cancel(self) -> None:
        """Cancel tasks that have not finished and wait for them to unwind."""
        pending = [task for task in self._active_tasks if not task.done()]
        for task in pending:
            task.cancel()

        if pending:
            logger.debug(f"Cancelling {len(pending)} pending extraction task(s)")
            await asyncio.gather(*pending, return_exceptions=True)

        self._active_tasks.clear()
