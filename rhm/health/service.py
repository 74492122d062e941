"""
Admin health aggregation.

Usage:
    from rhm.health.service import HealthService

    service = HealthService(
        provider=DuckDBSnapshotProvider(db_path),
        thresholds=load_thresholds(),
        history=HistoryTracker(capacity=24),
    )
    report = service.get_admin_health(include_history=True)
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timezone

from loguru import logger

from rhm.health.evaluator import ALERT_RULES, AlertRule, derive_status, evaluate_alerts
from rhm.health.history import HistoryTracker
from rhm.health.models import HealthReport
from rhm.health.provider import MetricsSnapshotProvider
from rhm.ops.metrics import MetricsCollector
from rhm.ops.thresholds import HealthThresholds


class HealthService:
    """
    Turns a metrics snapshot into a health report.

    Each call is independent; the history tracker is the only shared state.
    Provider failures propagate unchanged and leave history untouched.
    """

    def __init__(
        self,
        provider: MetricsSnapshotProvider,
        thresholds: HealthThresholds | None = None,
        history: HistoryTracker | None = None,
        rules: Sequence[AlertRule] = ALERT_RULES,
        clock: Callable[[], datetime] | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Args:
            provider: Source of fresh metrics snapshots
            thresholds: Configured limits (default: HealthThresholds())
            history: Report history (default: HistoryTracker with capacity 24)
            rules: Ordered metric/threshold table
            clock: Returns the current aware UTC time; injectable for tests
            metrics: Prometheus collector (default: MetricsCollector())
        """
        self.provider = provider
        self.thresholds = thresholds if thresholds is not None else HealthThresholds()
        self.history = history if history is not None else HistoryTracker()
        self.rules = tuple(rules)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.metrics = metrics if metrics is not None else MetricsCollector()

    def get_thresholds(self) -> HealthThresholds:
        """Copy of the configured thresholds."""
        return replace(self.thresholds)

    def evaluate(self) -> HealthReport:
        """Run one evaluation without touching history."""
        snapshot = self.provider.collect()
        now = self._clock()
        alerts = evaluate_alerts(snapshot, self.thresholds, self.rules, now=now)
        return HealthReport(
            status=derive_status(alerts),
            timestamp=now,
            metrics=snapshot,
            alerts=tuple(alerts),
            thresholds=self.get_thresholds(),
        )

    def get_admin_health(self, include_history: bool = True) -> HealthReport:
        """
        Evaluate current health and record it.

        Args:
            include_history: Attach retained reports, most recent first

        Returns:
            Complete HealthReport; ``history`` is None unless requested

        Raises:
            Exception: Whatever the snapshot provider raised
        """
        start = time.perf_counter()
        try:
            report = self.evaluate()
        except Exception as e:
            self.metrics.record_failure()
            logger.error(f"Health evaluation failed: {e}")
            raise

        if include_history:
            history = self.history.record_and_snapshot(report)
        else:
            history = None
            self.history.record(report)
        self.metrics.record_evaluation(report, time.perf_counter() - start, len(self.history))

        if report.alerts:
            alert_ids = ", ".join(alert.id for alert in report.alerts)
            logger.warning(f"Health {report.status.value}: {len(report.alerts)} alert(s) [{alert_ids}]")
        else:
            logger.debug("Health evaluation: healthy")

        if history is not None:
            return replace(report, history=history)
        return report
