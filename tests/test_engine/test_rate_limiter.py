"""Tests for the tick-counting rate limiter."""

import pytest

from ratecache.engine.rate_limiter import RateLimiter, rate_limit_step


class TestRateLimitStep:
    def test_dispatch_only_at_zero(self) -> None:
        assert rate_limit_step(0, 5) == (True, 1)
        assert rate_limit_step(1, 5) == (False, 2)
        assert rate_limit_step(4, 5) == (False, 0)

    def test_factor_one_always_dispatches(self) -> None:
        assert rate_limit_step(0, 1) == (True, 0)


class TestRateLimiter:
    @pytest.mark.parametrize("factor", [1, 2, 5, 7])
    def test_exactly_one_dispatch_per_window(self, factor: int) -> None:
        limiter = RateLimiter(factor)
        for _ in range(4):
            window = [limiter.advance() for _ in range(factor)]
            assert window[0] is True
            assert window.count(True) == 1

    def test_first_tick_dispatches(self) -> None:
        assert RateLimiter(10).advance() is True

    def test_counter_and_ticks(self) -> None:
        limiter = RateLimiter(3)
        for _ in range(4):
            limiter.advance()
        assert limiter.counter == 1
        assert limiter.ticks == 4

    def test_invalid_factor(self) -> None:
        with pytest.raises(ValueError):
            RateLimiter(0)
