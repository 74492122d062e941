"""
Threshold evaluation and status derivation.

Which metric is checked against which threshold is declared once, in
``ALERT_RULES``. The evaluator walks that table in order, so the alert sequence
is the same for the same inputs no matter which metrics breach first.

Severity mapping:
    failed_renewals   warning, critical at 2x the threshold or more
    contract_errors   always critical
    agent_inactivity  warning, critical at 2x the threshold or more
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from rhm.health.models import Alert, HealthStatus, MetricsSnapshot, Severity
from rhm.ops.thresholds import HealthThresholds


@dataclass(frozen=True)
class AlertRule:
    """
    One metric/threshold pairing.

    Attributes:
        metric_key: MetricsSnapshot attribute holding the observed value
        threshold_key: HealthThresholds attribute holding the limit
        alert_id: Stable identifier of the emitted alert
        severity: Severity of a breach
        escalation_factor: If set, a value at or above threshold * factor is critical
        message: Format string receiving ``value`` and ``threshold``
    """

    metric_key: str
    threshold_key: str
    alert_id: str
    severity: Severity
    escalation_factor: float | None = None
    message: str = "{alert_id}: value {value} exceeds threshold {threshold}"

    def severity_for(self, value: float, threshold: float) -> Severity:
        if self.escalation_factor is not None and value >= threshold * self.escalation_factor:
            return Severity.CRITICAL
        return self.severity

    def build_alert(self, value: float, threshold: float, triggered_at: datetime) -> Alert:
        return Alert(
            id=self.alert_id,
            message=self.message.format(alert_id=self.alert_id, value=value, threshold=threshold),
            severity=self.severity_for(value, threshold),
            value=value,
            threshold=threshold,
            triggered_at=triggered_at,
        )


ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        metric_key="failed_renewals_last_hour",
        threshold_key="failed_renewals_per_hour",
        alert_id="failed_renewals",
        severity=Severity.WARNING,
        escalation_factor=2.0,
        message="Failed renewals in the last hour ({value}) exceed threshold ({threshold})",
    ),
    AlertRule(
        metric_key="contract_errors_last_hour",
        threshold_key="contract_errors_per_hour",
        alert_id="contract_errors",
        severity=Severity.CRITICAL,
        message="Contract/blockchain errors in the last hour ({value}) exceed threshold ({threshold})",
    ),
    AlertRule(
        metric_key="agent_inactivity_hours",
        threshold_key="agent_inactivity_hours",
        alert_id="agent_inactivity",
        severity=Severity.WARNING,
        escalation_factor=2.0,
        message="No reminder processing activity for {value} hours (threshold: {threshold}h)",
    ),
)


def evaluate_alerts(
    snapshot: MetricsSnapshot,
    thresholds: HealthThresholds,
    rules: Sequence[AlertRule] = ALERT_RULES,
    now: datetime | None = None,
) -> list[Alert]:
    """
    Compare a snapshot against thresholds.

    A rule fires when the observed value strictly exceeds the configured limit.
    Rules without a configured threshold, or whose metric was not observed,
    are skipped.

    Args:
        snapshot: Observed metrics
        thresholds: Configured limits
        rules: Ordered metric/threshold table
        now: Evaluation time stamped on every alert (default: current UTC time)

    Returns:
        Alerts in rule order
    """
    triggered_at = now or datetime.now(timezone.utc)
    alerts = []

    for rule in rules:
        threshold = thresholds.get(rule.threshold_key)
        if threshold is None:
            continue
        value = snapshot.get(rule.metric_key)
        if value is None:
            continue
        if value > threshold:
            alerts.append(rule.build_alert(value, threshold, triggered_at))

    return alerts


def derive_status(alerts: Sequence[Alert]) -> HealthStatus:
    """Unhealthy iff any alert fired."""
    return HealthStatus.UNHEALTHY if alerts else HealthStatus.HEALTHY
