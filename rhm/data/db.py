"""
DuckDB access to the renewal pipeline database.

The health monitor only reads what the pipeline writes, so each operation opens
a short-lived connection and closes it right away. That keeps the file free for
the pipeline process and guarantees every metrics snapshot sees current data.

    db = get_db("~/rhm-data/pipeline.duckdb", read_only=True)
    count = db.fetchone("SELECT COUNT(*) FROM reminder_schedules")[0]
"""

import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional, Tuple, Union

import duckdb
from loguru import logger

# Default data directory
DEFAULT_DATA_DIR = Path.home() / "rhm-data"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "pipeline.duckdb"


class DatabaseManager:
    """
    DuckDB connection manager, one instance per (path, mode).

    Connections are opened per operation; ``read_only`` managers never create
    the database file.
    """

    _lock = threading.Lock()
    _instances: dict = {}

    def __new__(cls, db_path: Union[Path, str, None] = None, read_only: bool = False):
        """Singleton per database path and mode."""
        instance_key = (str(db_path) if db_path else None, read_only)
        if instance_key not in cls._instances:
            with cls._lock:
                if instance_key not in cls._instances:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    cls._instances[instance_key] = instance
        return cls._instances[instance_key]

    def __init__(self, db_path: Union[Path, str, None] = None, read_only: bool = False):
        """
        Initialize the database manager.

        Args:
            db_path: Path to DuckDB database file. Defaults to ~/rhm-data/pipeline.duckdb
            read_only: If True, connections are opened read-only (default: False)
        """
        if self._initialized:
            return

        self.db_path = Path(db_path).expanduser() if db_path else self._get_db_path()
        self.read_only = read_only
        self._initialized = True

        if not read_only:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        mode_str = "read-only" if read_only else "read-write"
        logger.debug(f"Database manager initialized: {self.db_path} (mode: {mode_str})")

    def _get_db_path(self) -> Path:
        """Get database path from RHM_DB_PATH, RHM_DATA_DIR, or the default."""
        db_path = os.getenv("RHM_DB_PATH")
        if db_path:
            return Path(db_path).expanduser()

        data_dir = os.getenv("RHM_DATA_DIR", str(DEFAULT_DATA_DIR))
        return Path(data_dir).expanduser() / "pipeline.duckdb"

    @contextmanager
    def connection(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """Open a connection for the duration of the block."""
        conn = duckdb.connect(str(self.db_path), read_only=self.read_only)
        try:
            yield conn
        except Exception as e:
            logger.error(f"Database error: {e}")
            raise
        finally:
            conn.close()

    def fetchall(self, query: str, params: Union[tuple, None] = None) -> List[Tuple]:
        """Execute a query and fetch all rows."""
        with self.connection() as conn:
            if params:
                return conn.execute(query, params).fetchall()
            return conn.execute(query).fetchall()

    def fetchone(self, query: str, params: Union[tuple, None] = None) -> Optional[Tuple]:
        """Execute a query and fetch one row, or None."""
        with self.connection() as conn:
            if params:
                return conn.execute(query, params).fetchone()
            return conn.execute(query).fetchone()

    @classmethod
    def reset(cls) -> None:
        """Drop all singleton instances (useful for testing)."""
        with cls._lock:
            cls._instances.clear()


def get_db(db_path: Union[Path, str, None] = None, read_only: bool = False) -> DatabaseManager:
    """
    Get the database manager for a path.

    Args:
        db_path: Path to DuckDB database file. Defaults to ~/rhm-data/pipeline.duckdb
        read_only: If True, returns a read-only manager (default: False)

    Returns:
        DatabaseManager instance
    """
    return DatabaseManager(db_path, read_only)
