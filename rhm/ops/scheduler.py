"""
Periodic health snapshots.

Runs an evaluation on a fixed interval so the report history keeps filling
even when nobody calls the admin endpoint.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger
from pytz import utc

from rhm.health.service import HealthService

SNAPSHOT_JOB_ID = "health_snapshot"

# Delay before the first snapshot after start
INITIAL_DELAY_SECONDS = 5


class SnapshotScheduler:
    """
    Background scheduler recording a health snapshot every interval.

    Example:
        scheduler = SnapshotScheduler(service, interval_minutes=15)
        scheduler.start()
        ...
        scheduler.shutdown()
    """

    def __init__(self, service: HealthService, interval_minutes: int = 15):
        """
        Args:
            service: Health service to evaluate
            interval_minutes: Minutes between snapshots (must be >= 1)
        """
        if interval_minutes < 1:
            raise ValueError(f"Snapshot interval must be at least 1 minute, got {interval_minutes}")
        self.service = service
        self.interval_minutes = interval_minutes
        self.scheduler = BackgroundScheduler(timezone=utc)
        logger.info(f"Snapshot scheduler initialized (every {interval_minutes} min)")

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def record_snapshot(self) -> bool:
        """
        Evaluate and record one snapshot.

        Returns:
            True if a report was recorded, False if the evaluation failed
        """
        try:
            report = self.service.get_admin_health(include_history=False)
        except Exception as e:
            logger.error(f"Scheduled health snapshot failed: {e}")
            return False

        logger.info(f"Recorded health snapshot: {report.status.value}, {len(report.alerts)} alert(s)")
        return True

    def start(self) -> None:
        """Schedule the snapshot job and start the scheduler."""
        if self.scheduler.running:
            logger.warning("Snapshot scheduler is already running")
            return

        self.scheduler.add_job(
            self.record_snapshot,
            IntervalTrigger(minutes=self.interval_minutes),
            id=SNAPSHOT_JOB_ID,
            replace_existing=True,
            next_run_time=datetime.now(timezone.utc) + timedelta(seconds=INITIAL_DELAY_SECONDS),
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info("Snapshot scheduler started")

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: Wait for a running snapshot to complete
        """
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Snapshot scheduler shutdown complete")
        else:
            logger.warning("Snapshot scheduler is not running")

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"<SnapshotScheduler({state}, every {self.interval_minutes} min)>"
