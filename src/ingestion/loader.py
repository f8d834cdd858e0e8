"""Load star-schema CSV extracts into DuckDB."""

import duckdb
import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass, field
from tqdm import tqdm

from config import config
from config.logging_config import get_logger
from src.database.schema import TABLES

logger = get_logger("loader")

# Dimensions first so facts can be checked against them
LOAD_ORDER = list(TABLES)

# Columns that must be present in each extract
REQUIRED_COLUMNS = {
    "dim_region": ["region_id", "state_name"],
    "dim_disease": ["disease_id", "disease_name"],
    "fact_cases_weekly": ["region_id", "disease_id", "year", "week", "current_week_cases"],
    "fact_population_state_year": ["region_id", "year", "population"],
    "fact_population_state_demo_year": ["region_id", "year", "race", "sex", "age_group", "population"],
    "fact_deaths_demographic": ["disease_id", "year", "demographic_type", "demographic_value", "deaths"],
    "fact_deaths_region": ["region_id", "disease_id", "year", "race", "sex", "age_group", "deaths"],
}


@dataclass
class LoadResult:
    """Result of loading one CSV file into one table."""

    table: str
    filename: str
    records_loaded: int = 0
    duration_seconds: float = 0
    error_messages: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.error_messages


def table_columns(conn: duckdb.DuckDBPyConnection, table: str) -> List[str]:
    """Column names of a table in definition order."""
    rows = conn.execute(
        """
        SELECT column_name FROM information_schema.columns
        WHERE table_name = ?
        ORDER BY ordinal_position
        """,
        [table],
    ).fetchall()
    return [r[0] for r in rows]


def load_csv(
    conn: duckdb.DuckDBPyConnection,
    table: str,
    csv_path: Path,
    replace: bool = False,
    chunk_size: int = 100_000,
) -> LoadResult:
    """
    Append (or replace) the rows of a CSV extract into ``table``.

    Columns not defined on the table are ignored. The file is read in chunks
    and inserted inside one transaction.
    """
    if table not in TABLES:
        raise ValueError(f"Unknown table: {table}")

    result = LoadResult(table=table, filename=csv_path.name)
    start = datetime.now()

    header = pd.read_csv(csv_path, nrows=0).columns.tolist()
    missing = [c for c in REQUIRED_COLUMNS[table] if c not in header]
    if missing:
        result.error_messages.append(f"{csv_path.name} missing columns: {', '.join(missing)}")
        logger.error(result.error_messages[-1])
        return result

    columns = [c for c in table_columns(conn, table) if c in header]
    column_list = ", ".join(columns)

    conn.execute("BEGIN TRANSACTION")
    try:
        if replace:
            conn.execute(f"DELETE FROM {table}")
        reader = pd.read_csv(csv_path, usecols=columns, chunksize=chunk_size)
        for chunk in tqdm(reader, desc=f"Loading {table}", unit="chunk", leave=False):
            conn.register("_load_chunk", chunk)
            conn.execute(f"INSERT INTO {table} ({column_list}) SELECT {column_list} FROM _load_chunk")
            conn.unregister("_load_chunk")
            result.records_loaded += len(chunk)
        conn.execute("COMMIT")
    except (duckdb.Error, ValueError) as e:
        conn.execute("ROLLBACK")
        result.records_loaded = 0
        result.error_messages.append(f"{csv_path.name}: {e}")
        logger.error(f"Failed to load {csv_path.name} into {table}: {e}")

    result.duration_seconds = (datetime.now() - start).total_seconds()
    if result.success:
        logger.info(f"Loaded {result.records_loaded:,} rows into {table} ({result.duration_seconds:.1f}s)")
    return result


def load_directory(
    conn: duckdb.DuckDBPyConnection,
    data_dir: Path,
    tables: Optional[List[str]] = None,
    replace: bool = False,
) -> Dict[str, LoadResult]:
    """
    Load ``<table>.csv`` files from ``data_dir`` in dependency order.

    Tables without a file are skipped with a warning.
    """
    results = {}
    for table in LOAD_ORDER:
        if tables and table not in tables:
            continue
        csv_path = data_dir / f"{table}.csv"
        if not csv_path.exists():
            logger.warning(f"No extract for {table} in {data_dir}")
            continue
        results[table] = load_csv(conn, table, csv_path, replace=replace)
    return results


def check_population_edge_year(conn: duckdb.DuckDBPyConnection) -> Optional[int]:
    """
    Compare the latest loaded population year with the configured edge year.

    Returns the latest population year; logs a warning when they differ.
    """
    row = conn.execute("SELECT MAX(year) FROM fact_population_state_year").fetchone()
    latest = row[0] if row else None
    edge = config.analytics.population_edge_year
    if latest is None:
        logger.warning("No population rows loaded")
    elif latest != edge:
        logger.warning(
            f"Latest population year is {latest} but EPI_POPULATION_EDGE_YEAR is {edge}"
        )
    return latest
