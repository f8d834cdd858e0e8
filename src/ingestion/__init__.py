"""Data ingestion module for loading surveillance extracts."""

from .loader import (
    LoadResult,
    LOAD_ORDER,
    REQUIRED_COLUMNS,
    load_csv,
    load_directory,
    check_population_edge_year,
)

__all__ = [
    "LoadResult",
    "LOAD_ORDER",
    "REQUIRED_COLUMNS",
    "load_csv",
    "load_directory",
    "check_population_edge_year",
]
