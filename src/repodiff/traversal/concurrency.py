"""Concurrency primitives for the tree traversal.

Leaf work (downloads and comparisons) shares one counting limiter for the
whole process. Directory listings are not limited. Sibling tasks are never
cancelled: every dispatched task runs to completion and the caller decides
what to do with the errors afterwards.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Iterable, List

logger = logging.getLogger(__name__)


class LeafLimiter:
    """Counting limiter around leaf operations.

    Waiters are served in FIFO order by the underlying semaphore. The
    ``in_flight`` and ``peak`` counters record how many holders exist now
    and at most.
    """

    def __init__(self, max_parallel: int = 5):
        if max_parallel < 1:
            raise ValueError(f"max_parallel must be at least 1, got {max_parallel}")
        self.max_parallel = max_parallel
        self._semaphore = asyncio.Semaphore(max_parallel)
        self.in_flight = 0
        self.peak = 0
        self.total = 0

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one slot for the duration of the block."""
        async with self._semaphore:
            self.in_flight += 1
            self.total += 1
            self.peak = max(self.peak, self.in_flight)
            logger.debug(f"Leaf slot acquired ({self.in_flight}/{self.max_parallel})")
            try:
                yield
            finally:
                self.in_flight -= 1
                logger.debug(
                    f"Leaf slot released ({self.in_flight}/{self.max_parallel})"
                )


async def run_to_completion(aws: Iterable[Awaitable[object]]) -> List[Exception]:
    """Run awaitables concurrently and wait for every one of them.

    Returns:
        Errors raised by the awaitables, in the order they completed
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    errors: List[Exception] = []
    for next_done in asyncio.as_completed(tasks):
        try:
            await next_done
        except Exception as e:
            errors.append(e)
    return errors
