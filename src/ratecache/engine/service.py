"""Single owner of all cache and scheduling state.

Every mutation here runs as plain synchronous code on the event loop; the
only suspension point is the fetch await, which lives in a separate task
spawned by the Dispatcher. Entry points therefore never interleave on
shared state and need no locks. If driven from several threads, guard every
public method with one threading.Lock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ratecache.config import CacheSettings
from ratecache.engine.dispatcher import Dispatcher
from ratecache.engine.normalizer import normalize_job
from ratecache.engine.pending_jobs import PendingJobSet
from ratecache.engine.query import RangeQueryHandler
from ratecache.engine.rate_cache import RateCache
from ratecache.engine.rate_limiter import RateLimiter
from ratecache.logging import get_logger
from ratecache.models import DispatchOutcome, RatesResponse

if TYPE_CHECKING:
    from ratecache.market_data.rate_fetcher import RateSource

logger = get_logger(__name__)


class RateCacheService:
    """Time-bucketed rate cache with throttled background backfill.

    Usage:
        service = RateCacheService(settings.cache, source)
        response = service.get_rates(start, end)   # cached subset, schedules gaps
        await service.tick()                        # called by the tick driver
    """

    def __init__(self, settings: CacheSettings, source: RateSource) -> None:
        self._settings = settings
        self._cache = RateCache(settings.granularity_seconds)
        self._pending = PendingJobSet(settings.batch_seconds)
        self._limiter = RateLimiter(settings.rate_limit_factor)
        self._dispatcher = Dispatcher(self._cache, self._pending, self._limiter, source)
        self._query = RangeQueryHandler(
            self._cache,
            self._pending,
            max_points=settings.max_points,
            ladder=settings.sampling_ladder,
        )
        logger.info(
            "rate_cache_service_created",
            granularity=settings.granularity_seconds,
            batch_seconds=settings.batch_seconds,
            rate_limit_factor=settings.rate_limit_factor,
            max_points=settings.max_points,
        )

    @property
    def cache(self) -> RateCache:
        return self._cache

    @property
    def pending(self) -> PendingJobSet:
        return self._pending

    async def tick(self) -> DispatchOutcome:
        """Advance the rate limiter and dispatch at most one job."""
        return await self._dispatcher.on_tick()

    def get_rates(self, start: int, end: int) -> RatesResponse:
        """Serve the cached subset of a range and schedule its gaps."""
        return self._query.get_rates(start, end)

    def schedule(self, timestamp: int) -> tuple[int, bool]:
        """Manually schedule the batch covering ``timestamp``.

        Returns (batch_start, created).
        """
        created = self._pending.add(timestamp)
        return normalize_job(timestamp, self._pending.batch), created

    async def drain(self) -> None:
        """Wait for all in-flight fetches to complete."""
        await self._dispatcher.drain()

    def status(self) -> dict[str, Any]:
        """Snapshot of cache, queue and dispatch counters."""
        return {
            "cached_points": len(self._cache),
            "pending_jobs": len(self._pending),
            "in_flight": self._dispatcher.in_flight,
            "ticks": self._limiter.ticks,
            "dispatched": self._dispatcher.dispatched,
            "discarded": self._dispatcher.discarded,
            "fetch_failures": self._dispatcher.fetch_failures,
            "granularity_seconds": self._settings.granularity_seconds,
            "points_per_batch": self._settings.points_per_batch,
            "rate_limit_factor": self._settings.rate_limit_factor,
            "max_points": self._settings.max_points,
            "sampling_ladder": list(self._settings.sampling_ladder),
        }
