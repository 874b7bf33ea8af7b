"""Rate-limited background dispatcher for pending fetch jobs.

On every tick approved by the RateLimiter, pops one job, discards it if its
window is already cached, and otherwise spawns a background fetch task.
The tick never waits for the fetch: a slow exchange must not stall the
tick cadence.

Failure policy: a failed fetch is logged and dropped. The job is NOT
re-enqueued; the gap is rescheduled lazily by the next range query that
touches it.

A range query can re-add a batch while its fetch is still in flight. Once
that fetch lands, the duplicate job is removed from the pending set so it
is not dispatched only to be discarded.

Known limitation: "already cached" is judged by the batch's first minute
only. A batch whose first minute is cached but whose tail is missing (for
example, one fetched while its window still reached into the future) keeps
being re-added by queries and discarded here, so its tail is never
backfilled.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ratecache.engine.pending_jobs import PendingJobSet
from ratecache.engine.rate_cache import RateCache
from ratecache.engine.rate_limiter import RateLimiter
from ratecache.logging import get_logger
from ratecache.models import DispatchOutcome, FetchResult

if TYPE_CHECKING:
    from ratecache.market_data.rate_fetcher import RateSource

logger = get_logger(__name__)


class Dispatcher:
    """Turns rate-limited ticks into at most one remote fetch each.

    Args:
        cache: Destination for fetched samples.
        pending: Source of jobs to dispatch.
        limiter: Tick counter approving 1-in-N ticks.
        source: Fetch collaborator for batch windows.
    """

    def __init__(
        self,
        cache: RateCache,
        pending: PendingJobSet,
        limiter: RateLimiter,
        source: RateSource,
    ) -> None:
        self._cache = cache
        self._pending = pending
        self._limiter = limiter
        self._source = source
        self._tasks: set[asyncio.Task] = set()  # type: ignore[type-arg]
        self.dispatched = 0
        self.discarded = 0
        self.fetch_failures = 0

    @property
    def in_flight(self) -> int:
        """Number of fetch tasks still running."""
        return len(self._tasks)

    async def on_tick(self) -> DispatchOutcome:
        """Handle one tick. Returns what the tick did."""
        if not self._limiter.advance():
            return DispatchOutcome.RATE_LIMITED

        job = self._pending.pop_any()
        if job is None:
            logger.debug("dispatch_queue_empty", tick=self._limiter.ticks)
            return DispatchOutcome.EMPTY_QUEUE

        if job in self._cache:
            self.discarded += 1
            logger.info("job_already_cached", batch_start=job)
            return DispatchOutcome.ALREADY_CACHED

        window_end = job + self._pending.batch
        task = asyncio.create_task(self._run_fetch(job, window_end))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.dispatched += 1
        logger.info(
            "job_dispatched",
            batch_start=job,
            window_end=window_end,
            pending=len(self._pending),
        )
        return DispatchOutcome.DISPATCHED

    async def drain(self) -> None:
        """Wait for every in-flight fetch to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_fetch(self, window_start: int, window_end: int) -> None:
        """Fetch one window and apply the result to the cache."""
        try:
            result = await self._source.fetch(window_start, window_end)
        except asyncio.CancelledError:
            raise
        except Exception:
            self.fetch_failures += 1
            logger.error(
                "fetch_task_crashed",
                batch_start=window_start,
                exc_info=True,
            )
            return
        self._apply_result(result)

    def _apply_result(self, result: FetchResult) -> None:
        if not result.ok:
            self.fetch_failures += 1
            logger.warning(
                "fetch_failed",
                batch_start=result.window_start,
                kind=result.error_kind.value if result.error_kind else None,
                error=result.error,
            )
            return

        inserted = self._cache.put_many(result.samples)
        requeued = False
        if result.window_start in self._cache:
            requeued = self._pending.remove(result.window_start)
        logger.info(
            "fetch_cached",
            batch_start=result.window_start,
            received=len(result.samples),
            inserted=inserted,
            cached_points=len(self._cache),
            dropped_requeued=requeued,
        )
