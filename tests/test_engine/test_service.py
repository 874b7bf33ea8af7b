"""End-to-end tests for RateCacheService: query, tick, backfill, re-query."""

from decimal import Decimal

import pytest

from ratecache.engine.service import RateCacheService
from ratecache.models import DispatchOutcome


class TestEventualConsistency:
    @pytest.mark.asyncio
    async def test_query_then_backfill_then_requery(self, service: RateCacheService) -> None:
        first = service.get_rates(0, 600)
        assert first.rates == []
        assert service.pending.snapshot() == [0]

        assert await service.tick() == DispatchOutcome.DISPATCHED
        await service.drain()

        second = service.get_rates(0, 600)
        assert [s.timestamp for s in second.rates] == list(range(0, 660, 60))
        assert second.rates[0].rate == Decimal(100)
        assert len(service.pending) == 0

    @pytest.mark.asyncio
    async def test_query_never_awaits_fetch(self, service: RateCacheService, mock_source) -> None:
        service.get_rates(0, 30_000)
        mock_source.fetch.assert_not_called()
        assert service.pending.snapshot() == [0, 12_000, 24_000]

    @pytest.mark.asyncio
    async def test_dispatch_respects_rate_limit_factor(self, service: RateCacheService) -> None:
        service.get_rates(0, 30_000)
        outcomes = [await service.tick() for _ in range(9)]
        await service.drain()

        assert outcomes.count(DispatchOutcome.DISPATCHED) == 3
        assert outcomes[0] == outcomes[3] == outcomes[6] == DispatchOutcome.DISPATCHED
        assert len(service.cache) == 3 * 200


class TestSchedule:
    def test_manual_schedule_normalizes(self, service: RateCacheService) -> None:
        assert service.schedule(12_050) == (12_000, True)
        assert service.schedule(12_999) == (12_000, False)

    @pytest.mark.asyncio
    async def test_cached_batch_discarded_on_dispatch(self, service: RateCacheService, mock_source) -> None:
        service.cache.put(0, Decimal("1"))
        service.schedule(150)
        assert await service.tick() == DispatchOutcome.ALREADY_CACHED
        mock_source.fetch.assert_not_called()


class TestStatus:
    @pytest.mark.asyncio
    async def test_status_counters(self, service: RateCacheService) -> None:
        service.get_rates(0, 60)
        await service.tick()
        await service.drain()

        status = service.status()
        assert status["cached_points"] == 200
        assert status["pending_jobs"] == 0
        assert status["in_flight"] == 0
        assert status["ticks"] == 1
        assert status["dispatched"] == 1
        assert status["fetch_failures"] == 0
        assert status["rate_limit_factor"] == 3
        assert status["sampling_ladder"] == [1, 5, 15, 60, 720, 1440]
