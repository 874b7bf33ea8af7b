"""Stride-based downsampling to bound range query response size.

A fixed ascending ladder of multipliers (in units of the cache
granularity) is tried in order; the first one projecting fewer than
``max_points`` samples wins. Samples are kept iff their timestamp is a
multiple of the chosen interval. No averaging or interpolation.
"""

from collections.abc import Sequence

from ratecache.exceptions import SamplingLadderExhausted
from ratecache.models import RateSample, RatesResponse


def select_interval(count: int, max_points: int, ladder: Sequence[int]) -> int:
    """Return the smallest ladder multiplier ``i`` with ``count / i < max_points``.

    Raises:
        SamplingLadderExhausted: If even the largest multiplier projects too
            many points.
    """
    for multiplier in ladder:
        # count / multiplier < max_points, kept in integers
        if count < max_points * multiplier:
            return multiplier
    raise SamplingLadderExhausted(count, max_points, list(ladder))


def sample_rates(
    samples: Sequence[RateSample],
    granularity: int,
    max_points: int,
    ladder: Sequence[int],
) -> RatesResponse:
    """Downsample ``samples`` and return them sorted with the chosen interval."""
    multiplier = select_interval(len(samples), max_points, ladder)
    interval = multiplier * granularity
    kept = sorted(
        (s for s in samples if s.timestamp % interval == 0),
        key=lambda s: s.timestamp,
    )
    return RatesResponse(interval=interval, rates=kept)
