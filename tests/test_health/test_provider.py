"""Tests for DuckDBSnapshotProvider against a real DuckDB file."""

from datetime import timedelta

import pytest

from rhm.exceptions import EvaluationError, SnapshotCollectionError
from rhm.health.provider import DuckDBSnapshotProvider, inactivity_hours
from tests.fixtures.health import FIXED_NOW, insert_rows


class TestInactivityHours:
    def test_none_when_never_active(self):
        assert inactivity_hours(None, FIXED_NOW) is None

    def test_naive_treated_as_utc(self):
        last = (FIXED_NOW - timedelta(hours=5, minutes=30)).replace(tzinfo=None)
        assert inactivity_hours(last, FIXED_NOW) == 5.5


@pytest.mark.integration
class TestDuckDBSnapshotProvider:
    """Tests for metric queries."""

    def test_empty_database(self, pipeline_db):
        provider = DuckDBSnapshotProvider(pipeline_db, clock=lambda: FIXED_NOW)

        snapshot = provider.collect()

        assert snapshot.failed_renewals_last_hour == 0
        assert snapshot.contract_errors_last_hour == 0
        assert snapshot.pending_reminders == 0
        assert snapshot.last_agent_activity_at is None
        assert snapshot.agent_inactivity_hours is None
        assert snapshot.collected_at == FIXED_NOW

    def test_counts_within_window(self, pipeline_db):
        """Only rows updated in the last hour should be counted."""
        recent = FIXED_NOW - timedelta(minutes=10)
        old = FIXED_NOW - timedelta(hours=2)
        insert_rows(
            pipeline_db,
            "notification_deliveries",
            [
                ("d1", "failed", recent),
                ("d2", "failed", recent),
                ("d3", "failed", old),
                ("d4", "sent", recent),
            ],
        )
        insert_rows(
            pipeline_db,
            "blockchain_logs",
            [("b1", "failed", recent), ("b2", "confirmed", recent)],
        )

        snapshot = DuckDBSnapshotProvider(pipeline_db, clock=lambda: FIXED_NOW).collect()

        assert snapshot.failed_renewals_last_hour == 2
        assert snapshot.successful_deliveries_last_hour == 1
        assert snapshot.contract_errors_last_hour == 1
        assert snapshot.blockchain_failed_last_hour == 1

    def test_reminder_activity(self, pipeline_db):
        insert_rows(
            pipeline_db,
            "reminder_schedules",
            [
                ("r1", "pending", FIXED_NOW - timedelta(hours=1)),
                ("r2", "pending", FIXED_NOW - timedelta(hours=1)),
                ("r3", "sent", FIXED_NOW - timedelta(hours=30)),
                ("r4", "sent", FIXED_NOW - timedelta(hours=6)),
            ],
        )

        snapshot = DuckDBSnapshotProvider(pipeline_db, clock=lambda: FIXED_NOW).collect()

        assert snapshot.pending_reminders == 2
        assert snapshot.processed_reminders_last_24h == 1
        assert snapshot.last_agent_activity_at == FIXED_NOW - timedelta(hours=6)
        assert snapshot.agent_inactivity_hours == 6.0

    def test_missing_database_raises(self, tmp_path):
        """A missing database is an error, never a zero snapshot."""
        provider = DuckDBSnapshotProvider(str(tmp_path / "missing.duckdb"))

        with pytest.raises(SnapshotCollectionError) as exc_info:
            provider.collect()

        assert isinstance(exc_info.value, EvaluationError)
        assert exc_info.value.__cause__ is not None

    def test_missing_table_raises(self, tmp_path):
        import duckdb

        db_path = str(tmp_path / "bare.duckdb")
        duckdb.connect(db_path).close()

        with pytest.raises(SnapshotCollectionError):
            DuckDBSnapshotProvider(db_path).collect()
