"""Strictly rising multi-year trend detection."""

from typing import List, Optional, Sequence

import duckdb
import pandas as pd

from config.constants import RISING_TREND_SPAN
from config.logging_config import get_logger
from src.database import borrow_connection, to_int, to_optional_int
from .errors import data_source_errors
from .rates import per_100k, population_year_sql, resolve_edge_year
from .reference import resolve_disease_by_name
from .validation import require_fixed_span, require_name, require_year_range

logger = get_logger("trends")


def is_strictly_increasing(values: Sequence[float]) -> bool:
    """True when every value is greater than the one before it."""
    return all(b > a for a, b in zip(values, values[1:]))


def find_rising_entities(
    frame: pd.DataFrame,
    start_year: int,
    end_year: int,
    entity_col: str = "region_name",
    year_col: str = "year",
    rate_col: str = "rate",
) -> List[str]:
    """
    Entities whose rate rises strictly every year from start_year to end_year.

    Entities missing a year in the range, or with an undefined rate for any
    year, are excluded before the comparison. Sorted by name.

    Args:
        frame: One row per (entity, year) with the rate for that year.
        start_year: First year of the window (inclusive).
        end_year: Last year of the window (inclusive).
    """
    require_year_range(start_year, end_year)
    if frame.empty:
        return []

    expected_years = end_year - start_year + 1
    in_range = frame[
        (frame[year_col] >= start_year) & (frame[year_col] <= end_year)
    ].dropna(subset=[rate_col])

    rising = []
    for entity, group in in_range.groupby(entity_col, sort=True):
        if group[year_col].nunique() != expected_years or len(group) != expected_years:
            continue
        series = group.sort_values(year_col)[rate_col].tolist()
        if is_strictly_increasing(series):
            rising.append(entity)
    return rising


def fetch_yearly_rates(
    conn: duckdb.DuckDBPyConnection,
    disease_id: int,
    start_year: int,
    end_year: int,
    edge_year: int,
) -> pd.DataFrame:
    """Per-region cases per 100k for each year in range, population at the fallback year."""
    frame = conn.execute(
        f"""
        WITH yearly_cases AS (
            SELECT
                f.region_id,
                f.year,
                SUM(COALESCE(f.current_week_cases, 0)) AS total_cases
            FROM fact_cases_weekly f
            WHERE f.disease_id = ?
              AND f.year BETWEEN ? AND ?
            GROUP BY f.region_id, f.year
        )
        SELECT
            r.state_name AS region_name,
            y.year,
            y.total_cases,
            p.population
        FROM yearly_cases y
        JOIN dim_region r ON r.region_id = y.region_id
        LEFT JOIN fact_population_state_year p
            ON p.region_id = y.region_id
           AND p.year = {population_year_sql('y.year')}
        ORDER BY r.state_name, y.year
        """,
        [disease_id, start_year, end_year, edge_year],
    ).df()

    frame["total_cases"] = [to_int(v) for v in frame["total_cases"]]
    frame["population"] = [to_optional_int(v) for v in frame["population"]]
    frame["rate"] = pd.Series(
        [per_100k(c, p) for c, p in zip(frame["total_cases"], frame["population"])],
        index=frame.index,
        dtype="float64",
    )
    return frame


def get_rising_regions(
    disease_name: str,
    start_year: int,
    end_year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[str]:
    """
    Regions whose cases per 100k rose strictly in each year of a four-year window.

    Raises:
        ValidationError: ``end_year - start_year`` is not exactly 3.
    """
    require_name(disease_name, "disease_name")
    require_fixed_span(start_year, end_year, RISING_TREND_SPAN)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("trend query"):
        disease_id = resolve_disease_by_name(c, disease_name)
        frame = fetch_yearly_rates(c, disease_id, start_year, end_year, edge)

    rising = find_rising_entities(frame, start_year, end_year)
    logger.debug(f"{len(rising)} regions rising for {disease_name} {start_year}-{end_year}")
    return rising
