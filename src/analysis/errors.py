"""Failure types raised by the analytics layer.

Data conditions such as a zero population or an empty peer group are not
errors; they resolve to documented sentinel values inside each component.
"""

from contextlib import contextmanager

import duckdb


class AnalyticsError(Exception):
    """Base class for analytics failures."""

    pass


class ValidationError(AnalyticsError):
    """A parameter is missing, malformed or out of range."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class NotFoundError(AnalyticsError):
    """The requested combination has no matching row (distinct from a zero value)."""

    pass


class DataSourceError(AnalyticsError):
    """The underlying query failed for infrastructure reasons."""

    pass


@contextmanager
def data_source_errors(operation: str):
    """Re-raise DuckDB errors raised inside the block as ``DataSourceError``."""
    try:
        yield
    except duckdb.Error as e:
        raise DataSourceError(f"{operation} failed: {e}") from e
