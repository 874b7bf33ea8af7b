"""Range query handler: serve cached minutes, schedule the missing ones.

Queries never block on missing data. They return whatever subset of the
range is already cached and enqueue background jobs for the gaps; callers
re-query later to observe backfilled data.
"""

from collections import Counter
from collections.abc import Sequence

from ratecache.engine.normalizer import align_to_granularity, normalize_job
from ratecache.engine.pending_jobs import PendingJobSet
from ratecache.engine.rate_cache import RateCache
from ratecache.engine.sampler import sample_rates
from ratecache.exceptions import InvalidRangeError
from ratecache.logging import get_logger
from ratecache.models import RateSample, RatesResponse

logger = get_logger(__name__)


class RangeQueryHandler:
    """Partitions a query range into cached and missing minutes."""

    def __init__(
        self,
        cache: RateCache,
        pending: PendingJobSet,
        max_points: int,
        ladder: Sequence[int],
    ) -> None:
        self._cache = cache
        self._pending = pending
        self._max_points = max_points
        self._ladder = list(ladder)

    def get_rates(self, start: int, end: int) -> RatesResponse:
        """Return cached samples for ``[start, end]`` after alignment.

        Both bounds are floored to the cache granularity and the aligned
        range is scanned inclusively. Spans wider than the sampling ladder
        can cover are rejected before any scan. Sampling happens before any
        job is scheduled so a SamplingLadderExhausted failure leaves state
        unchanged.

        Raises:
            InvalidRangeError: If a bound is negative, end precedes start, or
                the span exceeds ``max_points * ladder[-1]`` minutes.
            SamplingLadderExhausted: If the range is too wide for the ladder.
        """
        if start < 0 or end < 0:
            raise InvalidRangeError(f"range bounds must be non-negative: [{start}, {end})")
        if end < start:
            raise InvalidRangeError(f"range end {end} precedes start {start}")

        granularity = self._cache.granularity
        start_aligned = align_to_granularity(start, granularity)
        end_aligned = align_to_granularity(end, granularity)

        span = (end_aligned - start_aligned) // granularity + 1
        if span > self.max_span:
            raise InvalidRangeError(
                f"range of {span} points exceeds the maximum span of {self.max_span}"
            )

        hits = self._collect_hits(start_aligned, end_aligned, span)
        response = sample_rates(hits, granularity, self._max_points, self._ladder)

        missing = self._missing_batches(start_aligned, end_aligned, hits)
        scheduled = sum(1 for batch_start in missing if self._pending.add(batch_start))

        logger.debug(
            "range_query",
            start=start_aligned,
            end=end_aligned,
            hits=len(hits),
            misses=span - len(hits),
            jobs_scheduled=scheduled,
            interval=response.interval,
            returned=len(response.rates),
        )
        return response

    @property
    def max_span(self) -> int:
        """Widest range, in cache points, the ladder can downsample."""
        return self._max_points * self._ladder[-1]

    def _collect_hits(self, start: int, end: int, span: int) -> list[RateSample]:
        """Cached samples in ``[start, end]``, walking whichever side is smaller."""
        if span <= len(self._cache):
            granularity = self._cache.granularity
            hits = []
            for minute in range(start, end + granularity, granularity):
                rate = self._cache.get(minute)
                if rate is not None:
                    hits.append(RateSample(timestamp=minute, rate=rate))
            return hits
        return sorted(
            (
                RateSample(timestamp=ts, rate=rate)
                for ts, rate in self._cache.items()
                if start <= ts <= end
            ),
            key=lambda s: s.timestamp,
        )

    def _missing_batches(self, start: int, end: int, hits: list[RateSample]) -> list[int]:
        """Batch starts in ``[start, end]`` with at least one uncached point."""
        granularity = self._cache.granularity
        batch = self._pending.batch
        cached_per_batch = Counter(normalize_job(s.timestamp, batch) for s in hits)

        missing = []
        for batch_start in range(normalize_job(start, batch), end + 1, batch):
            low = max(batch_start, start)
            high = min(batch_start + batch - granularity, end)
            expected = (high - low) // granularity + 1
            if cached_per_batch[batch_start] < expected:
                missing.append(batch_start)
        return missing
