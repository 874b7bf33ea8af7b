"""Shared data models for the rate cache service.

CRITICAL: All rate values use Decimal. Never use float for prices.
Timestamps are integer seconds since the Unix epoch.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class DispatchOutcome(str, Enum):
    """What a single tick did."""

    RATE_LIMITED = "rate_limited"
    EMPTY_QUEUE = "empty_queue"
    ALREADY_CACHED = "already_cached"
    DISPATCHED = "dispatched"


class FetchErrorKind(str, Enum):
    """Classification of a failed remote fetch."""

    NETWORK = "network"
    EXCHANGE = "exchange"
    TIMEOUT = "timeout"
    RESPONSE_TOO_LARGE = "response_too_large"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class RateSample:
    """A single cached price sample, aligned to the cache granularity."""

    timestamp: int
    rate: Decimal


@dataclass
class RatesResponse:
    """Result of a range query: the sampling interval and the kept samples."""

    interval: int  # seconds
    rates: list[RateSample] = field(default_factory=list)


@dataclass
class FetchResult:
    """Explicit outcome of one remote fetch for a batch window.

    Built via FetchResult.success() or FetchResult.failure(); the dispatcher
    branches on ``ok`` instead of catching exceptions.
    """

    window_start: int
    window_end: int
    ok: bool
    samples: list[RateSample] = field(default_factory=list)
    error: str | None = None
    error_kind: FetchErrorKind | None = None
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def success(
        cls,
        window_start: int,
        window_end: int,
        samples: list[RateSample],
        headers: tuple[tuple[str, str], ...] = (),
    ) -> "FetchResult":
        return cls(
            window_start=window_start,
            window_end=window_end,
            ok=True,
            samples=samples,
            headers=headers,
        )

    @classmethod
    def failure(
        cls,
        window_start: int,
        window_end: int,
        kind: FetchErrorKind,
        error: str,
    ) -> "FetchResult":
        return cls(
            window_start=window_start,
            window_end=window_end,
            ok=False,
            error=error,
            error_kind=kind,
        )
