"""Tests for SnapshotScheduler."""

from unittest.mock import MagicMock

import pytest

from rhm.exceptions import SnapshotCollectionError
from rhm.health.history import HistoryTracker
from rhm.health.service import HealthService
from rhm.ops.scheduler import SNAPSHOT_JOB_ID, SnapshotScheduler
from tests.fixtures.health import StubProvider, make_snapshot


@pytest.fixture
def service():
    return HealthService(
        provider=StubProvider(make_snapshot()),
        history=HistoryTracker(capacity=5),
        metrics=MagicMock(),
    )


class TestSnapshotScheduler:
    """Tests for periodic snapshot recording."""

    def test_rejects_zero_interval(self, service):
        with pytest.raises(ValueError):
            SnapshotScheduler(service, interval_minutes=0)

    def test_record_snapshot_appends_history(self, service):
        scheduler = SnapshotScheduler(service)

        assert scheduler.record_snapshot() is True
        assert len(service.history) == 1

    def test_record_snapshot_swallows_failure(self, service):
        """A failed background snapshot is logged and reported, not raised."""
        service.provider.error = SnapshotCollectionError("down")
        scheduler = SnapshotScheduler(service)

        assert scheduler.record_snapshot() is False
        assert len(service.history) == 0

    def test_start_and_shutdown(self, service):
        scheduler = SnapshotScheduler(service, interval_minutes=15)
        assert not scheduler.running
        assert "stopped" in repr(scheduler)

        scheduler.start()
        try:
            assert scheduler.running
            job = scheduler.scheduler.get_job(SNAPSHOT_JOB_ID)
            assert job is not None
            assert job.next_run_time is not None
        finally:
            scheduler.shutdown(wait=False)

        assert not scheduler.running
