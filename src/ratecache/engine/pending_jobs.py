"""Deduplicated FIFO set of batch windows awaiting a remote fetch."""

from collections import OrderedDict

from ratecache.engine.normalizer import normalize_job
from ratecache.logging import get_logger

logger = get_logger(__name__)


class PendingJobSet:
    """Pending fetch jobs keyed by normalized batch-start timestamp.

    Jobs are popped in insertion order. Adding a timestamp whose batch is
    already pending is a no-op, so repeated range queries over the same gap
    never create duplicate work.
    """

    def __init__(self, batch: int) -> None:
        self._batch = batch
        self._jobs: OrderedDict[int, None] = OrderedDict()

    @property
    def batch(self) -> int:
        return self._batch

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, batch_start: object) -> bool:
        return batch_start in self._jobs

    def add(self, timestamp: int) -> bool:
        """Schedule the batch covering ``timestamp``.

        Returns True if a new job was created, False if already pending.
        """
        batch_start = normalize_job(timestamp, self._batch)
        if batch_start in self._jobs:
            return False
        self._jobs[batch_start] = None
        logger.debug("job_scheduled", batch_start=batch_start, pending=len(self._jobs))
        return True

    def pop_any(self) -> int | None:
        """Remove and return the oldest pending job, or None when empty."""
        if not self._jobs:
            return None
        batch_start, _ = self._jobs.popitem(last=False)
        return batch_start

    def remove(self, batch_start: int) -> bool:
        """Remove a specific job. Missing jobs are logged and ignored."""
        if batch_start not in self._jobs:
            logger.debug("job_not_found", batch_start=batch_start)
            return False
        del self._jobs[batch_start]
        return True

    def snapshot(self) -> list[int]:
        """Return pending batch starts in dispatch order."""
        return list(self._jobs)
