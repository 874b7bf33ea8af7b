"""Custom exceptions for the rate cache service.

All engine and exchange-layer exceptions live here to avoid circular
imports between modules.
"""

from ratecache.models import FetchErrorKind


class RateCacheError(Exception):
    """Base exception for all rate cache errors."""


class InvalidRangeError(RateCacheError, ValueError):
    """Raised when a range query has negative bounds or end before start."""


class SamplingLadderExhausted(RateCacheError):
    """Raised when no sampling interval keeps a result under the point ceiling.

    This is an invariant violation: the queried span is larger than the
    configured ladder can cover. It aborts the current call only.
    """

    def __init__(self, count: int, max_points: int, ladder: list[int]) -> None:
        self.count = count
        self.max_points = max_points
        self.ladder = list(ladder)
        super().__init__(
            f"{count} points cannot be sampled under {max_points} "
            f"with ladder {self.ladder}"
        )


class FetchError(RateCacheError):
    """Raised inside the fetch collaborator; always converted to a FetchResult."""

    def __init__(self, kind: FetchErrorKind, message: str) -> None:
        self.kind = kind
        super().__init__(message)


class ResponseTooLargeError(FetchError):
    """Raised when a fetch response exceeds its fixed byte budget."""

    def __init__(self, size: int, budget: int) -> None:
        self.size = size
        self.budget = budget
        super().__init__(
            FetchErrorKind.RESPONSE_TOO_LARGE,
            f"response of {size} bytes exceeds budget of {budget} bytes",
        )
