"""
Pytest configuration and fixtures for RHM tests.
"""

import pytest

from tests.fixtures.health import FIXED_NOW, make_snapshot


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def healthy_snapshot():
    return make_snapshot()


@pytest.fixture
def unhealthy_snapshot():
    """Failed renewals at twice the default threshold."""
    return make_snapshot(failed_renewals_last_hour=20)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Reset config and database singletons around every test."""
    from rhm.data.db import DatabaseManager
    from rhm.utils.config import reset_config

    reset_config()
    DatabaseManager.reset()
    yield
    reset_config()
    DatabaseManager.reset()


@pytest.fixture
def pipeline_db(tmp_path):
    """Empty pipeline database with the schema applied; yields its path."""
    from rhm.data.db import DatabaseManager
    from rhm.data.schema import init_schema

    db_path = str(tmp_path / "pipeline.duckdb")
    init_schema(db_path)
    DatabaseManager.reset()
    yield db_path
