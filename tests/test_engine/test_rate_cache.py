"""Tests for the append-only time-bucketed cache."""

from decimal import Decimal

import pytest

from ratecache.engine.rate_cache import RateCache
from ratecache.models import RateSample


@pytest.fixture
def cache() -> RateCache:
    return RateCache(granularity=60)


def test_put_and_get(cache: RateCache) -> None:
    assert cache.put(120, Decimal("50000.5")) is True
    assert cache.get(120) == Decimal("50000.5")
    assert 120 in cache
    assert len(cache) == 1


def test_missing_key_returns_none(cache: RateCache) -> None:
    assert cache.get(60) is None
    assert 60 not in cache


def test_rewrite_same_value_is_noop(cache: RateCache) -> None:
    cache.put(60, Decimal("1"))
    assert cache.put(60, Decimal("1")) is False
    assert len(cache) == 1


def test_rewrite_different_value_keeps_first(cache: RateCache) -> None:
    cache.put(60, Decimal("1"))
    assert cache.put(60, Decimal("2")) is False
    assert cache.get(60) == Decimal("1")


def test_unaligned_key_rejected(cache: RateCache) -> None:
    with pytest.raises(ValueError):
        cache.put(61, Decimal("1"))


def test_put_many_counts_new_entries(cache: RateCache) -> None:
    cache.put(0, Decimal("1"))
    inserted = cache.put_many(
        [
            RateSample(0, Decimal("1")),
            RateSample(60, Decimal("2")),
            RateSample(120, Decimal("3")),
        ]
    )
    assert inserted == 2
    assert len(cache) == 3
