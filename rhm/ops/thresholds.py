"""Configurable alert thresholds for the admin health report.

Thresholds can be configured via:
1. Environment variables (RHM_THRESHOLD_*)
2. YAML config file (~/rhm-data/config/thresholds.yaml)
3. Defaults

A threshold set to ``None`` (YAML ``null``, or an empty/``none`` env value) is
not configured and never raises an alert.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

_UNSET_VALUES = {"", "none", "null"}


@dataclass
class HealthThresholds:
    """Alert thresholds for the renewal pipeline."""

    # Failed renewal notifications per hour
    failed_renewals_per_hour: int | None = 10

    # Contract/blockchain errors per hour
    contract_errors_per_hour: int | None = 5

    # Hours without reminder processing activity
    agent_inactivity_hours: float | None = 24

    def get(self, key: str) -> float | None:
        """Return the configured limit for a threshold key, None if unset or unknown."""
        if key not in _FIELD_TYPES:
            return None
        return getattr(self, key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "failedRenewalsPerHour": self.failed_renewals_per_hour,
            "contractErrorsPerHour": self.contract_errors_per_hour,
            "agentInactivityHours": self.agent_inactivity_hours,
        }


_FIELD_TYPES = {
    "failed_renewals_per_hour": int,
    "contract_errors_per_hour": int,
    "agent_inactivity_hours": float,
}


def _coerce(name: str, value: Any) -> int | float | None:
    """Convert a raw config value, raising ValueError for anything not a clean number."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in _UNSET_VALUES:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if _FIELD_TYPES[name] is int:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        return int(value)
    return float(value)


def load_thresholds(config_path: str | Path | None = None) -> HealthThresholds:
    """
    Load thresholds with priority: Environment > YAML > Defaults.

    Args:
        config_path: Path to YAML config. Defaults to ~/rhm-data/config/thresholds.yaml

    Returns:
        HealthThresholds instance
    """
    thresholds = HealthThresholds()

    # Load from YAML if exists
    if config_path is None:
        config_path = os.path.expanduser("~/rhm-data/config/thresholds.yaml")

    if Path(config_path).exists():
        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load thresholds from {config_path}: {e}")
            yaml_config = {}

        if not isinstance(yaml_config, dict):
            logger.warning(f"Ignoring thresholds in {config_path}: expected a mapping")
            yaml_config = {}

        for key, value in yaml_config.items():
            if key not in _FIELD_TYPES:
                logger.warning(f"Unknown threshold in {config_path}: {key}")
                continue
            try:
                setattr(thresholds, key, _coerce(key, value))
            except (TypeError, ValueError) as e:
                logger.warning(f"Invalid threshold {key} in {config_path}: {e}")

        logger.debug(f"Loaded thresholds from {config_path}")

    # Apply environment variable overrides
    for field in fields(thresholds):
        env_key = f"RHM_THRESHOLD_{field.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            try:
                setattr(thresholds, field.name, _coerce(field.name, env_value))
                logger.debug(f"Threshold override: {field.name}={env_value}")
            except ValueError as e:
                logger.warning(f"Invalid env value for {env_key}: {e}")

    return thresholds
