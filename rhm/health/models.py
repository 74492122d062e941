"""
Data model of the admin health report.

All records are frozen: alerts and reports are never mutated after creation,
which lets the history tracker hand out the same objects to concurrent readers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from rhm.ops.thresholds import HealthThresholds


class Severity(str, Enum):
    """Alert severity levels."""

    WARNING = "warning"
    CRITICAL = "critical"


class HealthStatus(str, Enum):
    """Overall health of the pipeline."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Point-in-time operational metrics of the renewal pipeline.

    Attributes:
        failed_renewals_last_hour: Failed renewal notifications in the last hour
        successful_deliveries_last_hour: Delivered notifications in the last hour
        contract_errors_last_hour: Failed contract calls in the last hour
        blockchain_failed_last_hour: Failed blockchain log writes in the last hour
        last_agent_activity_at: Last time the reminder agent processed anything
        agent_inactivity_hours: Hours since last activity, None if never active
        pending_reminders: Reminders waiting to be processed
        processed_reminders_last_24h: Reminders processed in the last day
        collected_at: When the snapshot was taken
    """

    failed_renewals_last_hour: int
    successful_deliveries_last_hour: int
    contract_errors_last_hour: int
    blockchain_failed_last_hour: int
    last_agent_activity_at: datetime | None
    agent_inactivity_hours: float | None
    pending_reminders: int
    processed_reminders_last_24h: int
    collected_at: datetime

    def get(self, key: str) -> float | None:
        """Return an observed metric by attribute name, None if unobserved or unknown."""
        value = getattr(self, key, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "failedRenewalsLastHour": self.failed_renewals_last_hour,
            "successfulDeliveriesLastHour": self.successful_deliveries_last_hour,
            "contractErrorsLastHour": self.contract_errors_last_hour,
            "blockchainFailedLastHour": self.blockchain_failed_last_hour,
            "lastAgentActivityAt": _isoformat(self.last_agent_activity_at),
            "agentInactivityHours": self.agent_inactivity_hours,
            "pendingReminders": self.pending_reminders,
            "processedRemindersLast24h": self.processed_reminders_last_24h,
            "collectedAt": _isoformat(self.collected_at),
        }


@dataclass(frozen=True)
class Alert:
    """One threshold breach found during one evaluation."""

    id: str
    message: str
    severity: Severity
    value: float
    threshold: float
    triggered_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "severity": self.severity.value,
            "value": self.value,
            "threshold": self.threshold,
            "triggeredAt": self.triggered_at.isoformat(),
        }


@dataclass(frozen=True)
class HealthReport:
    """
    Result of one evaluation cycle.

    ``history`` is None when the caller did not ask for it; entries held by the
    history tracker always have ``history=None``.
    """

    status: HealthStatus
    timestamp: datetime
    metrics: MetricsSnapshot
    alerts: tuple[Alert, ...]
    thresholds: HealthThresholds
    history: tuple[HealthReport, ...] | None = None

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "metrics": self.metrics.to_dict(),
            "alerts": [alert.to_dict() for alert in self.alerts],
            "thresholds": self.thresholds.to_dict(),
        }
        if self.history is not None:
            result["history"] = [entry.to_dict() for entry in self.history]
        return result
