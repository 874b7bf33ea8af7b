"""Caching and scheduling engine.

Provides the time-bucketed rate cache, the FIFO pending-job set with batch
normalization, the tick-counting rate limiter, the background dispatcher,
the range query handler, and the stride-based interval sampler, all owned
by RateCacheService.
"""

from ratecache.engine.dispatcher import Dispatcher
from ratecache.engine.normalizer import align_to_granularity, batch_seconds, normalize_job
from ratecache.engine.pending_jobs import PendingJobSet
from ratecache.engine.query import RangeQueryHandler
from ratecache.engine.rate_cache import RateCache
from ratecache.engine.rate_limiter import RateLimiter, rate_limit_step
from ratecache.engine.sampler import sample_rates, select_interval
from ratecache.engine.service import RateCacheService

__all__ = [
    "Dispatcher",
    "PendingJobSet",
    "RangeQueryHandler",
    "RateCache",
    "RateCacheService",
    "RateLimiter",
    "align_to_granularity",
    "batch_seconds",
    "normalize_job",
    "rate_limit_step",
    "sample_rates",
    "select_interval",
]
