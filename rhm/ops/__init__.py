"""RHM Ops module - thresholds, metrics, and the admin health server."""

from rhm.ops.metrics import MetricsCollector
from rhm.ops.thresholds import HealthThresholds, load_thresholds

__all__ = ["HealthThresholds", "load_thresholds", "MetricsCollector"]
