"""
DuckDB tables of the renewal pipeline read by the health monitor.

The pipeline owns these tables; ``init_schema`` exists for local development
and tests. Run with: python -m rhm.ops --init-db
"""

from typing import Dict, Union

from loguru import logger

from rhm.data.db import get_db

TABLES: Dict[str, str] = {
    "notification_deliveries": """
        CREATE TABLE IF NOT EXISTS notification_deliveries (
            id VARCHAR PRIMARY KEY,
            reminder_id VARCHAR,
            channel VARCHAR,
            status VARCHAR NOT NULL,
            error_message VARCHAR,
            created_at TIMESTAMP DEFAULT current_timestamp,
            updated_at TIMESTAMP NOT NULL
        )
    """,
    "blockchain_logs": """
        CREATE TABLE IF NOT EXISTS blockchain_logs (
            id VARCHAR PRIMARY KEY,
            subscription_id VARCHAR,
            event_type VARCHAR,
            status VARCHAR NOT NULL,
            error_message VARCHAR,
            created_at TIMESTAMP DEFAULT current_timestamp,
            updated_at TIMESTAMP NOT NULL
        )
    """,
    "reminder_schedules": """
        CREATE TABLE IF NOT EXISTS reminder_schedules (
            id VARCHAR PRIMARY KEY,
            subscription_id VARCHAR,
            reminder_date DATE,
            status VARCHAR NOT NULL,
            created_at TIMESTAMP DEFAULT current_timestamp,
            updated_at TIMESTAMP NOT NULL
        )
    """,
}


def init_schema(db_path: Union[str, None] = None) -> None:
    """Create the pipeline tables if they do not exist. Idempotent."""
    db = get_db(db_path)
    with db.connection() as conn:
        for name, ddl in TABLES.items():
            conn.execute(ddl)
            logger.debug(f"Ensured table {name}")
    logger.info(f"Pipeline schema ready at {db.db_path}")
