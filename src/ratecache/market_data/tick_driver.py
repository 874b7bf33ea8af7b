"""Periodic tick source driving the dispatcher.

Calls RateCacheService.tick() once per interval from a background task.
Ticks are sequential; a slow tick delays the next one rather than
triggering a catch-up burst.
"""

import asyncio

from ratecache.engine.service import RateCacheService
from ratecache.logging import get_logger

logger = get_logger(__name__)


class TickDriver:
    """Background loop ticking the rate cache service at a fixed cadence."""

    def __init__(self, service: RateCacheService, interval_seconds: float = 1.0) -> None:
        self._service = service
        self._interval = interval_seconds
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self._tick_count = 0

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Begin ticking in the background."""
        if self._running:
            logger.warning("tick_driver_already_running")
            return
        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.info("tick_driver_started", interval=self._interval)

    async def stop(self) -> None:
        """Stop the tick loop. In-flight fetches are left to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("tick_driver_stopped", ticks=self._tick_count)

    async def _tick_loop(self) -> None:
        while self._running:
            try:
                await self._service.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.warning("tick_error", tick=self._tick_count, exc_info=True)
            self._tick_count += 1
            if self._running:
                await asyncio.sleep(self._interval)
