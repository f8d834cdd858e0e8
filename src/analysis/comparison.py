"""Side-by-side rate series for two aggregation scopes (e.g. region vs. national)."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import duckdb

from config.logging_config import get_logger
from src.database import borrow_connection, to_int, to_optional_int
from .concurrency import fan_out
from .errors import data_source_errors
from .rates import effective_population_year, per_100k, population_year_sql, resolve_edge_year
from .reference import resolve_disease_by_name, resolve_region
from .validation import require_name, require_year_range

logger = get_logger("comparison")


@dataclass(frozen=True)
class AggregationScope:
    """A set of regions aggregated together. ``region_names=None`` means all regions."""

    label: str
    region_names: Optional[Tuple[str, ...]] = None


NATIONAL = AggregationScope("national")


@dataclass
class ComparisonPoint:
    """Rates of two scopes for one year."""

    year: int
    first_per_100k: float
    second_per_100k: float


@dataclass
class RegionNationalPoint:
    """A region's rate next to the national rate for one year."""

    year: int
    region_per_100k: float
    national_per_100k: float


@dataclass
class WeeklyCasePoint:
    """Total cases for one week."""

    year: int
    week: int
    total_cases: int


def _scope_filter(scope: AggregationScope) -> Tuple[str, list]:
    if scope.region_names is None:
        return "", []
    placeholders = ", ".join("?" for _ in scope.region_names)
    return f"AND r.state_name IN ({placeholders})", list(scope.region_names)


def scope_rate_series(
    conn: duckdb.DuckDBPyConnection,
    scope: AggregationScope,
    disease_id: int,
    start_year: int,
    end_year: int,
    edge_year: int,
) -> Dict[int, Optional[float]]:
    """
    Cases per 100k of a scope for each year that has observations.

    The rate is sum-then-divide: total cases across the scope's regions over
    the total population of those regions at the fallback year. It is not
    the average of per-region rates. Regions without a population row at the
    fallback year are left out of both sums.
    """
    region_filter, region_params = _scope_filter(scope)

    case_rows = conn.execute(
        f"""
        SELECT f.year, SUM(COALESCE(f.current_week_cases, 0)) AS total_cases
        FROM fact_cases_weekly f
        JOIN dim_region r ON r.region_id = f.region_id
        JOIN fact_population_state_year p
          ON p.region_id = f.region_id AND p.year = {population_year_sql('f.year')}
        WHERE f.disease_id = ?
          AND f.year BETWEEN ? AND ?
          AND p.population IS NOT NULL
          {region_filter}
        GROUP BY f.year
        """,
        [edge_year, disease_id, start_year, end_year, *region_params],
    ).fetchall()

    pop_rows = conn.execute(
        f"""
        SELECT p.year, SUM(p.population) AS population
        FROM fact_population_state_year p
        JOIN dim_region r ON r.region_id = p.region_id
        WHERE p.year BETWEEN ? AND ?
          {region_filter}
        GROUP BY p.year
        """,
        [
            effective_population_year(start_year, edge_year),
            effective_population_year(end_year, edge_year),
            *region_params,
        ],
    ).fetchall()

    population_by_year = {int(y): to_optional_int(p) for y, p in pop_rows}
    return {
        int(year): per_100k(
            to_int(cases),
            population_by_year.get(effective_population_year(int(year), edge_year)),
        )
        for year, cases in case_rows
    }


def _fill(series: Dict[int, Optional[float]], year: int) -> float:
    value = series.get(year)
    return 0.0 if value is None else value


def compare_scopes(
    first: AggregationScope,
    second: AggregationScope,
    disease_name: str,
    start_year: int,
    end_year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[ComparisonPoint]:
    """
    Yearly cases per 100k of two scopes, one point per year in the range.

    Years without observations (or with an undefined rate) are filled with 0.
    Both scope series are queried concurrently.
    """
    require_name(disease_name, "disease_name")
    require_year_range(start_year, end_year)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("scope comparison"):
        disease_id = resolve_disease_by_name(c, disease_name)
        first_series, second_series = fan_out(
            c,
            lambda cur: scope_rate_series(cur, first, disease_id, start_year, end_year, edge),
            lambda cur: scope_rate_series(cur, second, disease_id, start_year, end_year, edge),
        )

    logger.debug(
        f"Compared {first.label} vs {second.label} for {disease_name} "
        f"{start_year}-{end_year}"
    )
    return [
        ComparisonPoint(
            year=year,
            first_per_100k=_fill(first_series, year),
            second_per_100k=_fill(second_series, year),
        )
        for year in range(start_year, end_year + 1)
    ]


def compare_region_to_national(
    region_name: str,
    disease_name: str,
    start_year: int,
    end_year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[RegionNationalPoint]:
    """Yearly cases per 100k of one region next to all regions combined."""
    require_name(region_name, "region_name")
    require_name(disease_name, "disease_name")
    require_year_range(start_year, end_year)

    with borrow_connection(conn) as c:
        with data_source_errors("region lookup"):
            resolve_region(c, region_name)
        points = compare_scopes(
            AggregationScope(region_name, (region_name,)),
            NATIONAL,
            disease_name,
            start_year,
            end_year,
            conn=c,
            edge_year=edge_year,
        )

    return [
        RegionNationalPoint(
            year=p.year,
            region_per_100k=p.first_per_100k,
            national_per_100k=p.second_per_100k,
        )
        for p in points
    ]


def get_weekly_case_series(
    region_name: str,
    disease_name: str,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
) -> List[WeeklyCasePoint]:
    """Weekly case totals for a region and disease, ordered by year and week."""
    require_name(region_name, "region_name")
    require_name(disease_name, "disease_name")

    with borrow_connection(conn) as c, data_source_errors("weekly series"):
        region_id = resolve_region(c, region_name)
        disease_id = resolve_disease_by_name(c, disease_name)
        rows = c.execute(
            """
            SELECT year, week, SUM(COALESCE(current_week_cases, 0)) AS total_cases
            FROM fact_cases_weekly
            WHERE region_id = ? AND disease_id = ?
            GROUP BY year, week
            ORDER BY year, week
            """,
            [region_id, disease_id],
        ).fetchall()

    return [WeeklyCasePoint(int(y), int(w), to_int(cases)) for y, w, cases in rows]
