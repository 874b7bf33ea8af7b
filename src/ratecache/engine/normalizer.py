"""Timestamp alignment for cache keys and fetch batch windows."""


def _floor(timestamp: int, unit: int) -> int:
    if timestamp < 0:
        raise ValueError(f"timestamp must be non-negative, got {timestamp}")
    if unit < 1:
        raise ValueError(f"alignment unit must be positive, got {unit}")
    return (timestamp // unit) * unit


def batch_seconds(granularity: int, points_per_batch: int) -> int:
    """Width of one fetch batch window: ``granularity * points_per_batch``."""
    return granularity * points_per_batch


def normalize_job(timestamp: int, batch: int) -> int:
    """Map a timestamp to the aligned start of the batch window covering it.

    Idempotent: normalize_job(normalize_job(t, b), b) == normalize_job(t, b).
    The result satisfies ``start <= timestamp < start + batch``.
    """
    return _floor(timestamp, batch)


def align_to_granularity(timestamp: int, granularity: int) -> int:
    """Floor a timestamp to the cache granularity."""
    return _floor(timestamp, granularity)
