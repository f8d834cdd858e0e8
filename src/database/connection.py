"""DuckDB connection management for Epi Analytics."""

import duckdb
from pathlib import Path
from typing import Optional
from contextlib import contextmanager

from config import config
from config.logging_config import get_logger

logger = get_logger("database")


class DatabaseConnection:
    """One DuckDB connection to the star-schema database file."""

    def __init__(self, db_path: Optional[Path] = None, read_only: bool = False):
        self.db_path = Path(db_path or config.database.path)
        self.read_only = read_only
        self._connection: Optional[duckdb.DuckDBPyConnection] = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Open the connection, creating the parent directory for writable files.

        The memory limit and thread count from ``config.database`` are applied
        once on open.
        """
        if self._connection is not None:
            return self._connection

        if not self.read_only:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = duckdb.connect(str(self.db_path), read_only=self.read_only)
        conn.execute(f"SET memory_limit = '{config.database.memory_limit}'")
        if config.database.threads > 0:
            conn.execute(f"SET threads = {config.database.threads}")
        self._connection = conn

        mode = "read-only" if self.read_only else "read-write"
        logger.info(f"Connected to database ({mode}): {self.db_path}")
        return conn

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed database connection: {self.db_path}")


@contextmanager
def get_connection(
    db_path: Optional[Path] = None, read_only: bool = False
) -> duckdb.DuckDBPyConnection:
    """
    Context manager for database connections.

    Args:
        db_path: Path to database file.
        read_only: Open in read-only mode.

    Yields:
        DuckDB connection object.

    Example:
        with get_connection() as conn:
            conn.execute("SELECT * FROM dim_region")
    """
    db = DatabaseConnection(db_path, read_only)
    try:
        yield db.connect()
    finally:
        db.close()


@contextmanager
def borrow_connection(conn: Optional[duckdb.DuckDBPyConnection] = None):
    """
    Yield ``conn`` if given, otherwise a read-only connection to the configured
    database that is closed on exit.
    """
    if conn is not None:
        yield conn
        return
    with get_connection(read_only=True) as own:
        yield own


def get_memory_connection() -> duckdb.DuckDBPyConnection:
    """
    Get an in-memory database connection for testing.

    Returns:
        In-memory DuckDB connection.
    """
    return duckdb.connect(":memory:")
