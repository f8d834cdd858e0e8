"""Reference data: regions, diseases and demographic options."""

from typing import Dict, List, Optional

import duckdb

from config.logging_config import get_logger
from src.database import borrow_connection, to_optional_int
from .concurrency import fan_out
from .errors import NotFoundError, data_source_errors

logger = get_logger("reference")


def resolve_region(conn: duckdb.DuckDBPyConnection, region_name: str) -> int:
    """Return the region_id for an exact canonical name, or raise ``NotFoundError``."""
    row = conn.execute(
        "SELECT region_id FROM dim_region WHERE state_name = ?", [region_name]
    ).fetchone()
    if row is None:
        raise NotFoundError(f"Unknown region: {region_name!r}")
    return row[0]


def resolve_disease_by_id(conn: duckdb.DuckDBPyConnection, disease_id: int) -> str:
    """Return the disease name for an id, or raise ``NotFoundError``."""
    row = conn.execute(
        "SELECT disease_name FROM dim_disease WHERE disease_id = ?", [disease_id]
    ).fetchone()
    if row is None:
        raise NotFoundError(f"Unknown disease id: {disease_id}")
    return row[0]


def resolve_disease_by_name(conn: duckdb.DuckDBPyConnection, disease_name: str) -> int:
    """Return the disease_id for an exact name, or raise ``NotFoundError``."""
    row = conn.execute(
        "SELECT disease_id FROM dim_disease WHERE disease_name = ?", [disease_name]
    ).fetchone()
    if row is None:
        raise NotFoundError(f"Unknown disease: {disease_name!r}")
    return row[0]


def list_regions(conn: Optional[duckdb.DuckDBPyConnection] = None) -> List[Dict]:
    """All regions ordered by name."""
    with borrow_connection(conn) as c, data_source_errors("region listing"):
        rows = c.execute(
            "SELECT state_code, state_name FROM dim_region ORDER BY state_name"
        ).fetchall()
    return [{"state_code": code, "state_name": name} for code, name in rows]


def list_diseases(
    year: Optional[int] = None,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
) -> List[Dict]:
    """
    Diseases ordered by name.

    Args:
        year: When given, only diseases with at least one case observation in
            that year.
        conn: Database connection.
    """
    if year is not None:
        sql = """
            SELECT d.disease_id, d.disease_name
            FROM dim_disease d
            WHERE EXISTS (
                SELECT 1 FROM fact_cases_weekly f
                WHERE f.disease_id = d.disease_id AND f.year = ?
            )
            ORDER BY d.disease_name
        """
        params = [year]
    else:
        sql = "SELECT disease_id, disease_name FROM dim_disease ORDER BY disease_name"
        params = []

    with borrow_connection(conn) as c, data_source_errors("disease listing"):
        rows = c.execute(sql, params).fetchall()
    return [{"disease_id": did, "disease_name": name} for did, name in rows]


def _distinct(column: str):
    def query(cur: duckdb.DuckDBPyConnection) -> List[str]:
        rows = cur.execute(
            f"SELECT DISTINCT {column} FROM fact_population_state_demo_year ORDER BY {column}"
        ).fetchall()
        return [r[0] for r in rows]

    return query


def get_demographic_options(conn: Optional[duckdb.DuckDBPyConnection] = None) -> Dict[str, List[str]]:
    """Distinct races, sexes and age groups present in the demographic population table."""
    with borrow_connection(conn) as c, data_source_errors("demographic options"):
        races, sexes, age_groups = fan_out(
            c, _distinct("race"), _distinct("sex"), _distinct("age_group")
        )
    return {"races": races, "sexes": sexes, "age_groups": age_groups}


def get_latest_population_year(conn: Optional[duckdb.DuckDBPyConnection] = None) -> Optional[int]:
    """Latest year present in the yearly population table (for load-time checks)."""
    with borrow_connection(conn) as c, data_source_errors("population year lookup"):
        row = c.execute("SELECT MAX(year) FROM fact_population_state_year").fetchone()
    return to_optional_int(row[0]) if row else None
