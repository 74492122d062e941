"""Admin health evaluation: snapshot, alerts, status, history."""

from rhm.health.auth import AdminAuthGate, AdminRequestContext, parse_history_flag
from rhm.health.evaluator import ALERT_RULES, AlertRule, derive_status, evaluate_alerts
from rhm.health.history import HistoryTracker
from rhm.health.models import Alert, HealthReport, HealthStatus, MetricsSnapshot, Severity
from rhm.health.provider import DuckDBSnapshotProvider, MetricsSnapshotProvider
from rhm.health.service import HealthService

__all__ = [
    "ALERT_RULES",
    "AdminAuthGate",
    "AdminRequestContext",
    "Alert",
    "AlertRule",
    "DuckDBSnapshotProvider",
    "HealthReport",
    "HealthService",
    "HealthStatus",
    "HistoryTracker",
    "MetricsSnapshot",
    "MetricsSnapshotProvider",
    "Severity",
    "derive_status",
    "evaluate_alerts",
    "parse_history_flag",
]
