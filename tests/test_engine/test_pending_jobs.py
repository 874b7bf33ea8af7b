"""Tests for the deduplicated FIFO pending-job set."""

import pytest

from ratecache.engine.pending_jobs import PendingJobSet


@pytest.fixture
def pending() -> PendingJobSet:
    return PendingJobSet(batch=12_000)


class TestAdd:
    def test_worked_example(self, pending: PendingJobSet) -> None:
        assert pending.add(150) is True
        assert pending.snapshot() == [0]
        assert pending.add(12_050) is True
        assert pending.snapshot() == [0, 12_000]

    def test_same_batch_deduplicated(self, pending: PendingJobSet) -> None:
        pending.add(60)
        assert pending.add(11_940) is False
        assert len(pending) == 1
        assert 0 in pending


class TestPop:
    def test_fifo_order(self, pending: PendingJobSet) -> None:
        for t in (36_000, 0, 12_000):
            pending.add(t)
        assert pending.pop_any() == 36_000
        assert pending.pop_any() == 0
        assert pending.pop_any() == 12_000

    def test_empty_returns_none(self, pending: PendingJobSet) -> None:
        assert pending.pop_any() is None

    def test_popped_job_can_be_readded(self, pending: PendingJobSet) -> None:
        pending.add(0)
        pending.pop_any()
        assert pending.add(0) is True
        assert pending.snapshot() == [0]


class TestRemove:
    def test_remove_existing(self, pending: PendingJobSet) -> None:
        pending.add(12_000)
        assert pending.remove(12_000) is True
        assert len(pending) == 0

    def test_remove_missing_is_noop(self, pending: PendingJobSet) -> None:
        pending.add(0)
        assert pending.remove(12_000) is False
        assert pending.snapshot() == [0]
