"""Prometheus metrics for RHM ops.

Tracks HTTP traffic on the ops server and the outcome of health evaluations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram

if TYPE_CHECKING:
    from rhm.health.models import HealthReport

REQUEST_COUNT = Counter(
    "rhm_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "rhm_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

EVALUATIONS = Counter(
    "rhm_health_evaluations_total",
    "Completed health evaluations by resulting status",
    ["status"],
)

EVALUATION_FAILURES = Counter(
    "rhm_health_evaluation_failures_total",
    "Health evaluations aborted by an error",
)

EVALUATION_LATENCY = Histogram(
    "rhm_health_evaluation_duration_seconds",
    "Health evaluation duration in seconds",
)

ACTIVE_ALERTS = Gauge(
    "rhm_health_active_alerts",
    "Alerts raised by the latest evaluation",
    ["alert_id"],
)

HISTORY_SIZE = Gauge(
    "rhm_health_history_entries",
    "Health reports retained in history",
)


class MetricsCollector:
    """Collects and records metrics for RHM."""

    def record_request(self, method: str, endpoint: str, status: int) -> None:
        """
        Record an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Request path
            status: HTTP status code
        """
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=str(status)).inc()

    def record_latency(self, method: str, endpoint: str, duration: float) -> None:
        """
        Record request latency.

        Args:
            method: HTTP method
            endpoint: Request path
            duration: Request duration in seconds
        """
        REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(duration)

    def record_evaluation(self, report: HealthReport, duration: float, history_size: int) -> None:
        """
        Record a completed evaluation.

        Args:
            report: The report just produced
            duration: Evaluation duration in seconds
            history_size: Entries retained after recording the report
        """
        EVALUATIONS.labels(status=report.status.value).inc()
        EVALUATION_LATENCY.observe(duration)
        HISTORY_SIZE.set(history_size)

        ACTIVE_ALERTS.clear()
        for alert in report.alerts:
            ACTIVE_ALERTS.labels(alert_id=alert.id).set(1)

    def record_failure(self) -> None:
        """Record an evaluation that raised."""
        EVALUATION_FAILURES.inc()
