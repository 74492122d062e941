"""
Metrics snapshot providers.

The health service asks a provider for a fresh snapshot on every evaluation.
Providers raise on failure; they never fill in zeros for data they could not
read, and they do not retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import duckdb
from loguru import logger

from rhm.data.db import get_db
from rhm.exceptions import SnapshotCollectionError
from rhm.health.models import MetricsSnapshot


class MetricsSnapshotProvider(ABC):
    """Source of the current pipeline metrics."""

    @abstractmethod
    def collect(self) -> MetricsSnapshot:
        """
        Collect the current metrics.

        Raises:
            SnapshotCollectionError: If the metrics cannot be read
        """


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def inactivity_hours(last_activity_at: datetime | None, now: datetime) -> float | None:
    """Hours between last activity and now, one decimal; None if never active."""
    if last_activity_at is None:
        return None
    if last_activity_at.tzinfo is None:
        last_activity_at = last_activity_at.replace(tzinfo=timezone.utc)
    return round((now - last_activity_at).total_seconds() / 3600, 1)


class DuckDBSnapshotProvider(MetricsSnapshotProvider):
    """
    Reads pipeline metrics from the DuckDB database the renewal pipeline writes.

    Timestamps in the pipeline tables are naive UTC.
    """

    _COUNT_SINCE = "SELECT COUNT(*) FROM {table} WHERE status = ? AND updated_at >= ?"

    def __init__(
        self,
        db_path: str | Path | None = None,
        read_only: bool = True,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            db_path: Pipeline database path (default: RHM_DB_PATH or ~/rhm-data/pipeline.duckdb)
            read_only: Open the database read-only (default: True)
            clock: Returns the current aware UTC time; injectable for tests
        """
        self.db = get_db(db_path, read_only=read_only)
        self._clock = clock or _utcnow

    def collect(self) -> MetricsSnapshot:
        now = self._clock()
        naive_now = now.astimezone(timezone.utc).replace(tzinfo=None)
        one_hour_ago = naive_now - timedelta(hours=1)
        one_day_ago = naive_now - timedelta(hours=24)

        try:
            with self.db.connection() as conn:
                failed_renewals = self._count(conn, "notification_deliveries", "failed", one_hour_ago)
                successful_deliveries = self._count(conn, "notification_deliveries", "sent", one_hour_ago)
                contract_errors = self._count(conn, "blockchain_logs", "failed", one_hour_ago)

                row = conn.execute(
                    "SELECT MAX(updated_at) FROM reminder_schedules WHERE status != 'pending'"
                ).fetchone()
                last_activity_at = row[0] if row else None

                pending = conn.execute(
                    "SELECT COUNT(*) FROM reminder_schedules WHERE status = 'pending'"
                ).fetchone()[0]
                processed = conn.execute(
                    "SELECT COUNT(*) FROM reminder_schedules "
                    "WHERE status != 'pending' AND updated_at >= ?",
                    [one_day_ago],
                ).fetchone()[0]
        except (duckdb.Error, OSError) as e:
            logger.error(f"Failed to collect health metrics from {self.db.db_path}: {e}")
            raise SnapshotCollectionError(f"Metrics collection failed: {e}") from e

        if last_activity_at is not None and last_activity_at.tzinfo is None:
            last_activity_at = last_activity_at.replace(tzinfo=timezone.utc)

        return MetricsSnapshot(
            failed_renewals_last_hour=failed_renewals,
            successful_deliveries_last_hour=successful_deliveries,
            contract_errors_last_hour=contract_errors,
            blockchain_failed_last_hour=contract_errors,
            last_agent_activity_at=last_activity_at,
            agent_inactivity_hours=inactivity_hours(last_activity_at, now),
            pending_reminders=pending,
            processed_reminders_last_24h=processed,
            collected_at=now,
        )

    def _count(self, conn: duckdb.DuckDBPyConnection, table: str, status: str, since: datetime) -> int:
        return conn.execute(self._COUNT_SINCE.format(table=table), [status, since]).fetchone()[0]
