"""Shared test fixtures for the rate cache service."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from ratecache.config import CacheSettings, ExchangeSettings
from ratecache.engine.service import RateCacheService
from ratecache.models import FetchResult, RateSample


@pytest.fixture
def cache_settings() -> CacheSettings:
    """CacheSettings matching the worked example: G=60, 200 points, BATCH=12000."""
    return CacheSettings(
        granularity_seconds=60,
        points_per_batch=200,
        rate_limit_factor=3,
        max_points=100,
        sampling_ladder=[1, 5, 15, 60, 720, 1440],
    )


@pytest.fixture
def exchange_settings() -> ExchangeSettings:
    return ExchangeSettings(exchange_id="bybit", symbol="BTC/USDT")


def make_window(window_start: int, window_end: int, granularity: int = 60) -> list[RateSample]:
    """One sample per minute in the window, rate = 100 + minute index."""
    return [
        RateSample(timestamp=ts, rate=Decimal(100 + (ts - window_start) // granularity))
        for ts in range(window_start, window_end, granularity)
    ]


@pytest.fixture
def mock_source() -> AsyncMock:
    """RateSource whose fetch fills the requested window completely."""
    source = AsyncMock()

    async def _fetch(window_start: int, window_end: int) -> FetchResult:
        return FetchResult.success(window_start, window_end, make_window(window_start, window_end))

    source.fetch = AsyncMock(side_effect=_fetch)
    return source


@pytest.fixture
def service(cache_settings: CacheSettings, mock_source: AsyncMock) -> RateCacheService:
    return RateCacheService(cache_settings, mock_source)


@pytest.fixture
def sample_window():
    """Factory building one sample per minute across a window."""
    return make_window
