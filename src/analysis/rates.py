"""Per-capita rate calculation with population year-fallback.

Population data only reaches a bounded edge year. Any population lookup for a
later year uses the edge year instead::

    effective_population_year = min(requested_year, edge_year)

Every query in the analytics package that joins population goes through
``effective_population_year`` or ``population_year_sql`` so the rule is
applied identically everywhere.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

import duckdb

from config import config
from config.constants import PER_CAPITA_SCALE
from config.logging_config import get_logger
from src.database import borrow_connection, to_int, to_optional_int
from .errors import data_source_errors
from .reference import resolve_disease_by_id, resolve_region
from .validation import require_ids, require_name, require_week, require_year

logger = get_logger("rates")


@dataclass
class RateRecord:
    """Cases per 100k for one (region, disease) in a year or week."""

    region_name: str
    disease_name: str
    year: int
    population_year: int
    total_cases: int
    population: Optional[int]
    cases_per_100k: Optional[float]
    week: Optional[int] = None


def effective_population_year(year: int, edge_year: Optional[int] = None) -> int:
    """Year whose population is used for ``year``: ``min(year, edge_year)``."""
    if edge_year is None:
        edge_year = config.analytics.population_edge_year
    return min(year, edge_year)


def population_year_sql(year_expr: str) -> str:
    """
    SQL form of ``effective_population_year`` for a year column or parameter.

    The returned fragment takes one positional parameter, the edge year.
    """
    return f"LEAST({year_expr}, ?)"


def resolve_edge_year(edge_year: Optional[int]) -> int:
    return config.analytics.population_edge_year if edge_year is None else edge_year


def per_100k(cases: Optional[float], population: Optional[float]) -> Optional[float]:
    """
    Scale a case count to cases per 100,000 population.

    Missing cases count as 0. A missing or non-positive population makes the
    rate undefined and returns ``None``.
    """
    if population is None or population <= 0:
        return None
    return (cases or 0) / population * PER_CAPITA_SCALE


def sort_by_rate(
    records: Iterable[Any],
    rate: Callable[[Any], Optional[float]] = lambda r: r.cases_per_100k,
    tiebreak: Callable[[Any], Any] = lambda r: (r.region_name, r.disease_name),
) -> List[Any]:
    """Sort descending by rate with undefined (``None``) rates last."""
    defined = [r for r in records if rate(r) is not None]
    undefined = [r for r in records if rate(r) is None]
    defined.sort(key=lambda r: (-rate(r), tiebreak(r)))
    undefined.sort(key=tiebreak)
    return defined + undefined


def fetch_rate_rows(
    conn: duckdb.DuckDBPyConnection,
    year: int,
    edge_year: int,
    disease_ids: Optional[Sequence[int]] = None,
    region_names: Optional[Sequence[str]] = None,
    week: Optional[int] = None,
) -> list:
    """Case totals per (region, disease) joined to the fallback-year population."""
    case_filters = ["f.year = ?"]
    params: list = [year]
    if disease_ids:
        case_filters.append(f"f.disease_id IN ({', '.join('?' for _ in disease_ids)})")
        params.extend(disease_ids)
    if week is not None:
        case_filters.append("f.week = ?")
        params.append(week)

    outer_filter = ""
    if region_names:
        outer_filter = f"WHERE r.state_name IN ({', '.join('?' for _ in region_names)})"

    sql = f"""
        WITH case_totals AS (
            SELECT
                f.region_id,
                f.disease_id,
                SUM(COALESCE(f.current_week_cases, 0)) AS total_cases
            FROM fact_cases_weekly f
            WHERE {' AND '.join(case_filters)}
            GROUP BY f.region_id, f.disease_id
        )
        SELECT
            r.state_name,
            d.disease_name,
            c.total_cases,
            p.population
        FROM case_totals c
        JOIN dim_region r ON r.region_id = c.region_id
        JOIN dim_disease d ON d.disease_id = c.disease_id
        LEFT JOIN fact_population_state_year p
            ON p.region_id = c.region_id
           AND p.year = {population_year_sql('?')}
        {outer_filter}
    """
    params.extend([year, edge_year])
    if region_names:
        params.extend(region_names)

    logger.debug(f"Rate query year={year} diseases={disease_ids} week={week}")
    return conn.execute(sql, params).fetchall()


def to_rate_records(rows: list, year: int, population_year: int, week: Optional[int]) -> List[RateRecord]:
    records = []
    for state_name, disease_name, total_cases, population in rows:
        cases = to_int(total_cases)
        pop = to_optional_int(population)
        records.append(
            RateRecord(
                region_name=state_name,
                disease_name=disease_name,
                year=year,
                week=week,
                population_year=population_year,
                total_cases=cases,
                population=pop,
                cases_per_100k=per_100k(cases, pop),
            )
        )
    return records


def get_rates(
    year: int,
    disease_ids: Sequence[int],
    region_names: Optional[Sequence[str]] = None,
    week: Optional[int] = None,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[RateRecord]:
    """
    Cases per 100k for every (region, disease) with observations in scope.

    Args:
        year: Case year.
        disease_ids: Diseases to include.
        region_names: Restrict to these regions (exact canonical names).
        week: Restrict to a single week of the year.
        conn: Database connection.
        edge_year: Last year with population data (defaults to config).

    Returns:
        Records sorted descending by rate, undefined rates last.
    """
    require_year(year)
    disease_ids = require_ids(disease_ids)
    if week is not None:
        require_week(week)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("rate query"):
        rows = fetch_rate_rows(c, year, edge, disease_ids, region_names, week)

    records = to_rate_records(rows, year, effective_population_year(year, edge), week)
    return sort_by_rate(records)


def get_region_rate(
    region_name: str,
    disease_id: int,
    year: int,
    week: Optional[int] = None,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> RateRecord:
    """
    Cases per 100k for one region and disease.

    An empty case scope yields ``total_cases == 0``. Raises ``NotFoundError``
    for an unknown region or disease.
    """
    require_name(region_name, "region_name")
    require_ids([disease_id], "disease_id")
    require_year(year)
    if week is not None:
        require_week(week)
    edge = resolve_edge_year(edge_year)
    pop_year = effective_population_year(year, edge)

    with borrow_connection(conn) as c, data_source_errors("region rate query"):
        region_id = resolve_region(c, region_name)
        disease_name = resolve_disease_by_id(c, disease_id)

        week_filter = "AND week = ?" if week is not None else ""
        params = [region_id, disease_id, year] + ([week] if week is not None else [])
        cases = c.execute(
            f"""
            SELECT COALESCE(SUM(COALESCE(current_week_cases, 0)), 0)
            FROM fact_cases_weekly
            WHERE region_id = ? AND disease_id = ? AND year = ? {week_filter}
            """,
            params,
        ).fetchone()[0]
        pop_row = c.execute(
            f"""
            SELECT population FROM fact_population_state_year
            WHERE region_id = ? AND year = {population_year_sql('?')}
            """,
            [region_id, year, edge],
        ).fetchone()

    total_cases = to_int(cases)
    population = to_optional_int(pop_row[0]) if pop_row else None
    return RateRecord(
        region_name=region_name,
        disease_name=disease_name,
        year=year,
        week=week,
        population_year=pop_year,
        total_cases=total_cases,
        population=population,
        cases_per_100k=per_100k(total_cases, population),
    )


def get_top_disease_by_region(
    year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[RateRecord]:
    """
    The highest-rate disease in each region for a year.

    Undefined rates never outrank defined ones. Ordered by region name.
    """
    require_year(year)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("top disease query"):
        rows = fetch_rate_rows(c, year, edge)

    records = to_rate_records(rows, year, effective_population_year(year, edge), None)
    top = {}
    for record in sort_by_rate(records):
        top.setdefault(record.region_name, record)
    return [top[name] for name in sorted(top)]
