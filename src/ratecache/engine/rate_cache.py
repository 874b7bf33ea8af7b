"""In-memory time-bucketed cache of price samples.

Keys are timestamps aligned to the cache granularity. The cache is
append-only: entries are never evicted or overwritten, since historical
candles returned by the exchange are stable.
"""

from collections.abc import Iterable, Iterator
from decimal import Decimal

from ratecache.logging import get_logger
from ratecache.models import RateSample

logger = get_logger(__name__)


class RateCache:
    """Append-only mapping of aligned timestamp -> rate.

    Unbounded by design; there is no eviction policy.
    """

    def __init__(self, granularity: int) -> None:
        self._granularity = granularity
        self._rates: dict[int, Decimal] = {}

    @property
    def granularity(self) -> int:
        return self._granularity

    def __len__(self) -> int:
        return len(self._rates)

    def __contains__(self, timestamp: object) -> bool:
        return timestamp in self._rates

    def get(self, timestamp: int) -> Decimal | None:
        """Return the cached rate for an aligned timestamp, or None."""
        return self._rates.get(timestamp)

    def items(self) -> Iterator[tuple[int, Decimal]]:
        """Iterate (timestamp, rate) pairs in insertion order."""
        return iter(self._rates.items())

    def put(self, timestamp: int, rate: Decimal) -> bool:
        """Store a rate if the key is new.

        Returns True when a new entry was written. Rewriting an existing
        key is a no-op; a differing value is logged and ignored.
        """
        if timestamp % self._granularity != 0:
            raise ValueError(
                f"timestamp {timestamp} is not aligned to {self._granularity}s"
            )
        existing = self._rates.get(timestamp)
        if existing is not None:
            if existing != rate:
                logger.warning(
                    "cached_rate_conflict",
                    timestamp=timestamp,
                    cached=existing,
                    incoming=rate,
                )
            return False
        self._rates[timestamp] = rate
        return True

    def put_many(self, samples: Iterable[RateSample]) -> int:
        """Store samples, returning the number of newly written entries."""
        inserted = 0
        for sample in samples:
            if self.put(sample.timestamp, sample.rate):
                inserted += 1
        return inserted
