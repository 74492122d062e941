"""
Configuration management for RHM.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Load .env file if it exists
load_dotenv()

DEFAULT_ADMIN_API_KEY = "development-admin-key"


@dataclass
class DataConfig:
    """Data layer configuration."""

    data_dir: Path = field(default_factory=lambda: Path.home() / "rhm-data")
    db_name: str = "pipeline.duckdb"
    db_path_override: Path | None = None

    @property
    def db_path(self) -> Path:
        if self.db_path_override is not None:
            return self.db_path_override
        return self.data_dir / self.db_name

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def thresholds_path(self) -> Path:
        return self.data_dir / "config" / "thresholds.yaml"


@dataclass
class HealthConfig:
    """Admin health endpoint configuration."""

    admin_api_key: str = DEFAULT_ADMIN_API_KEY
    history_size: int = 24
    snapshot_interval_minutes: int = 15
    thresholds_path: Path | None = None


@dataclass
class Config:
    """Main configuration class."""

    data: DataConfig = field(default_factory=DataConfig)
    health: HealthConfig = field(default_factory=HealthConfig)

    # General settings
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        data_dir = os.getenv("RHM_DATA_DIR")
        db_path = os.getenv("RHM_DB_PATH")
        thresholds_path = os.getenv("RHM_THRESHOLDS_PATH")

        admin_api_key = os.getenv("RHM_ADMIN_API_KEY") or os.getenv("ADMIN_API_KEY")
        if not admin_api_key:
            logger.warning("No admin API key configured, using the development default")
            admin_api_key = DEFAULT_ADMIN_API_KEY

        return cls(
            data=DataConfig(
                data_dir=Path(data_dir).expanduser() if data_dir else Path.home() / "rhm-data",
                db_path_override=Path(db_path).expanduser() if db_path else None,
            ),
            health=HealthConfig(
                admin_api_key=admin_api_key,
                history_size=_int_env("RHM_HISTORY_SIZE", 24),
                snapshot_interval_minutes=_int_env("RHM_SNAPSHOT_INTERVAL_MINUTES", 15),
                thresholds_path=Path(thresholds_path).expanduser() if thresholds_path else None,
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def thresholds_path(self) -> Path:
        """Thresholds YAML location, explicit setting first."""
        return self.health.thresholds_path or self.data.thresholds_path


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {value!r}, using {default}")
        return default


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
