"""Tests for threshold evaluation and status derivation."""

from dataclasses import replace

from rhm.health.evaluator import ALERT_RULES, AlertRule, derive_status, evaluate_alerts
from rhm.health.models import HealthStatus, Severity
from rhm.ops.thresholds import HealthThresholds
from tests.fixtures.health import FIXED_NOW, make_snapshot


class TestAlertRules:
    """Tests for the declared metric/threshold table."""

    def test_rule_order(self):
        """Rules should be declared in a fixed order."""
        assert [rule.alert_id for rule in ALERT_RULES] == [
            "failed_renewals",
            "contract_errors",
            "agent_inactivity",
        ]

    def test_rule_keys_exist(self):
        """Every rule should point at real snapshot and threshold fields."""
        snapshot = make_snapshot()
        thresholds = HealthThresholds()
        for rule in ALERT_RULES:
            assert hasattr(snapshot, rule.metric_key)
            assert hasattr(thresholds, rule.threshold_key)

    def test_escalation(self):
        """A value at twice the threshold should escalate to critical."""
        rule = ALERT_RULES[0]
        assert rule.severity_for(15, 10) == Severity.WARNING
        assert rule.severity_for(20, 10) == Severity.CRITICAL

    def test_contract_errors_always_critical(self):
        """Contract errors have no escalation step."""
        rule = ALERT_RULES[1]
        assert rule.severity_for(6, 5) == Severity.CRITICAL


class TestEvaluateAlerts:
    """Tests for evaluate_alerts."""

    def test_no_alerts_when_healthy(self):
        """Values under every threshold should produce no alerts."""
        alerts = evaluate_alerts(make_snapshot(), HealthThresholds(), now=FIXED_NOW)
        assert alerts == []

    def test_failed_renewals_alert(self):
        """20 failed renewals against a limit of 10 should raise exactly one alert."""
        snapshot = make_snapshot(failed_renewals_last_hour=20)
        thresholds = HealthThresholds(failed_renewals_per_hour=10)

        alerts = evaluate_alerts(snapshot, thresholds, now=FIXED_NOW)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.id == "failed_renewals"
        assert alert.value == 20
        assert alert.threshold == 10
        assert alert.severity == Severity.CRITICAL
        assert alert.triggered_at == FIXED_NOW
        assert "20" in alert.message and "10" in alert.message

    def test_value_equal_to_threshold_does_not_alert(self):
        """Only values strictly above the threshold should alert."""
        snapshot = make_snapshot(failed_renewals_last_hour=10, contract_errors_last_hour=5)
        alerts = evaluate_alerts(snapshot, HealthThresholds(), now=FIXED_NOW)
        assert alerts == []

    def test_alerts_follow_rule_order(self):
        """Alerts should come out in rule order whatever breaches."""
        snapshot = make_snapshot(
            failed_renewals_last_hour=11,
            contract_errors_last_hour=50,
            agent_inactivity_hours=30.0,
        )
        alerts = evaluate_alerts(snapshot, HealthThresholds(), now=FIXED_NOW)
        assert [a.id for a in alerts] == ["failed_renewals", "contract_errors", "agent_inactivity"]

    def test_unconfigured_threshold_skipped(self):
        """A None threshold should never produce an alert."""
        snapshot = make_snapshot(contract_errors_last_hour=500)
        thresholds = HealthThresholds(contract_errors_per_hour=None)
        assert evaluate_alerts(snapshot, thresholds, now=FIXED_NOW) == []

    def test_unobserved_metric_skipped(self):
        """An agent that never ran has no inactivity value to compare."""
        snapshot = make_snapshot(last_agent_activity_at=None, agent_inactivity_hours=None)
        assert evaluate_alerts(snapshot, HealthThresholds(), now=FIXED_NOW) == []

    def test_agent_inactivity_severity(self):
        """Inactivity beyond the limit warns; twice the limit is critical."""
        thresholds = HealthThresholds(agent_inactivity_hours=24)

        warning = evaluate_alerts(make_snapshot(agent_inactivity_hours=30.0), thresholds, now=FIXED_NOW)
        critical = evaluate_alerts(make_snapshot(agent_inactivity_hours=48.0), thresholds, now=FIXED_NOW)

        assert warning[0].severity == Severity.WARNING
        assert critical[0].severity == Severity.CRITICAL

    def test_custom_rules(self):
        """Callers may evaluate with their own rule table."""
        rules = (
            AlertRule(
                metric_key="pending_reminders",
                threshold_key="contract_errors_per_hour",
                alert_id="pending_backlog",
                severity=Severity.WARNING,
            ),
        )
        alerts = evaluate_alerts(make_snapshot(pending_reminders=9), HealthThresholds(), rules, now=FIXED_NOW)
        assert [a.id for a in alerts] == ["pending_backlog"]
        assert alerts[0].message == "pending_backlog: value 9 exceeds threshold 5"

    def test_unknown_keys_skipped(self):
        """Rules naming unknown fields should be skipped, not raise."""
        rules = (AlertRule("no_such_metric", "no_such_threshold", "x", Severity.WARNING),)
        assert evaluate_alerts(make_snapshot(), HealthThresholds(), rules, now=FIXED_NOW) == []

    def test_repeatable(self):
        """Same inputs should give the same alerts apart from triggered_at."""
        snapshot = make_snapshot(failed_renewals_last_hour=14, contract_errors_last_hour=9)
        thresholds = HealthThresholds()

        first = evaluate_alerts(snapshot, thresholds)
        second = evaluate_alerts(snapshot, thresholds)

        assert [replace(a, triggered_at=FIXED_NOW) for a in first] == [
            replace(a, triggered_at=FIXED_NOW) for a in second
        ]


class TestDeriveStatus:
    """Tests for derive_status."""

    def test_healthy_without_alerts(self):
        assert derive_status([]) == HealthStatus.HEALTHY

    def test_unhealthy_with_any_alert(self):
        """Even a single warning makes the status unhealthy."""
        snapshot = make_snapshot(failed_renewals_last_hour=11)
        alerts = evaluate_alerts(snapshot, HealthThresholds(), now=FIXED_NOW)
        assert alerts[0].severity == Severity.WARNING
        assert derive_status(alerts) == HealthStatus.UNHEALTHY
