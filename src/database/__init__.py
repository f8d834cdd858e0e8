"""Database module for DuckDB operations."""

from .connection import (
    DatabaseConnection,
    get_connection,
    borrow_connection,
    get_memory_connection,
)
from .schema import (
    initialize_database,
    create_all_tables,
    create_all_indexes,
    get_table_counts,
    drop_all_tables,
)
from .coercion import (
    to_int,
    to_float,
    to_optional_float,
    to_optional_int,
)

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_connection",
    "borrow_connection",
    "get_memory_connection",
    # Schema
    "initialize_database",
    "create_all_tables",
    "create_all_indexes",
    "get_table_counts",
    "drop_all_tables",
    # Coercion
    "to_int",
    "to_float",
    "to_optional_float",
    "to_optional_int",
]
