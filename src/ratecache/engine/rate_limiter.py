"""Tick-counting rate limiter for outbound fetch dispatch.

Dispatch decisions are a pure function of tick count, never wall-clock
time: a delayed or skipped tick is not caught up.
"""


def rate_limit_step(counter: int, factor: int) -> tuple[bool, int]:
    """Return (should_dispatch, next_counter) for one tick.

    Dispatch is approved only when the counter is 0 before the tick, so
    exactly one of every ``factor`` ticks dispatches, starting with the first.
    """
    return counter == 0, (counter + 1) % factor


class RateLimiter:
    """Cyclic counter turning 1-in-N ticks into a dispatch decision."""

    def __init__(self, factor: int) -> None:
        if factor < 1:
            raise ValueError(f"rate limit factor must be >= 1, got {factor}")
        self._factor = factor
        self._counter = 0
        self._ticks = 0

    @property
    def factor(self) -> int:
        return self._factor

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def ticks(self) -> int:
        """Total ticks observed since construction."""
        return self._ticks

    def advance(self) -> bool:
        """Consume one tick and return whether it may dispatch."""
        allowed, self._counter = rate_limit_step(self._counter, self._factor)
        self._ticks += 1
        return allowed
