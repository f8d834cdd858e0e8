"""Database connection service for FastAPI."""

import duckdb
from typing import Optional
from pathlib import Path

from api.config import get_settings
from config import config


class DatabaseService:
    """Manages the DuckDB connection shared by API requests."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        connection: Optional[duckdb.DuckDBPyConnection] = None,
    ):
        """Initialize database service.

        Args:
            db_path: Path to database file.
            connection: Existing connection to use instead of opening db_path.
        """
        settings = get_settings()
        self.db_path = db_path or settings.database_path
        self._connection: Optional[duckdb.DuckDBPyConnection] = connection
        self._owns_connection = connection is None

    def connect(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = duckdb.connect(str(self.db_path), read_only=True)
            self._configure()
        return self._connection

    def _configure(self) -> None:
        """Configure connection for read performance."""
        if self._connection:
            self._connection.execute(f"SET memory_limit = '{config.database.memory_limit}'")
            if config.database.threads > 0:
                self._connection.execute(f"SET threads = {config.database.threads}")

    def cursor(self) -> duckdb.DuckDBPyConnection:
        """A new cursor for one request; cursors may be used from other threads."""
        return self.connect().cursor()

    def execute(self, query: str, params: Optional[list] = None):
        """Execute a query and return results."""
        conn = self.connect()
        if params:
            return conn.execute(query, params)
        return conn.execute(query)

    def fetch_one(self, query: str, params: Optional[list] = None):
        """Execute query and fetch one result."""
        return self.execute(query, params).fetchone()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection and self._owns_connection:
            self._connection.close()
        self._connection = None


# Global database instance
_db_service: Optional[DatabaseService] = None


def get_db() -> DatabaseService:
    """Get global database service instance."""
    global _db_service
    if _db_service is None:
        _db_service = DatabaseService()
    return _db_service


def close_db() -> None:
    """Close the global database connection."""
    global _db_service
    if _db_service is not None:
        _db_service.close()
        _db_service = None
