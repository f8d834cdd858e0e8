"""Trailing-window maximum of weekly per-capita rates."""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import duckdb

from config import config
from config.constants import MIN_WEEK
from config.logging_config import get_logger
from src.database import borrow_connection, to_int, to_optional_int
from .concurrency import fan_out
from .errors import data_source_errors
from .rates import effective_population_year, per_100k, population_year_sql, resolve_edge_year
from .validation import require_ids, require_positive, require_week, require_year

logger = get_logger("windows")


@dataclass
class WeeklyRateRecord:
    """Weekly rate and trailing-window maximum for one (region, disease)."""

    region_name: str
    disease_name: str
    year: int
    week: int
    window_start: int
    population_year: int
    weekly_cases: int
    population: Optional[int]
    cases_per_100k: Optional[float]
    window_max_per_100k: Optional[float]


def window_bounds(target_week: int, window: Optional[int] = None) -> Tuple[int, int]:
    """
    Inclusive week range of the trailing window ending at ``target_week``.

    The window is clamped at week 1; it never reaches into the prior year.
    """
    if window is None:
        window = config.analytics.window_weeks
    return max(MIN_WEEK, target_week - window + 1), target_week


def compute_window_max(
    weekly_cases: Mapping[int, int],
    population: Optional[int],
    target_week: int,
    window: Optional[int] = None,
) -> Optional[float]:
    """
    Maximum weekly rate over the window ending at ``target_week``.

    Weeks without observations count as 0 cases. Near the start of the year
    the window is simply shorter. Returns ``None`` when the population is
    undefined.
    """
    start, end = window_bounds(target_week, window)
    rates = [per_100k(weekly_cases.get(w, 0), population) for w in range(start, end + 1)]
    if any(r is None for r in rates):
        return None
    return max(rates)


def get_weekly_rates(
    year: int,
    week: int,
    disease_ids: Sequence[int],
    window: Optional[int] = None,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[WeeklyRateRecord]:
    """
    Weekly rate and trailing-window maximum for every (region, disease).

    Each pair is computed independently. Only pairs with an observation in the
    target week are reported; earlier weeks of the window without one count as
    0 cases. Ordered by region name, then disease name.
    """
    require_year(year)
    require_week(week)
    disease_ids = require_ids(disease_ids)
    if window is None:
        window = config.analytics.window_weeks
    require_positive(window, "window")
    edge = resolve_edge_year(edge_year)
    start, end = window_bounds(week, window)
    placeholders = ", ".join("?" for _ in disease_ids)

    def weekly_totals(cur: duckdb.DuckDBPyConnection) -> list:
        return cur.execute(
            f"""
            SELECT
                r.state_name,
                d.disease_name,
                f.week,
                SUM(COALESCE(f.current_week_cases, 0)) AS weekly_cases
            FROM fact_cases_weekly f
            JOIN dim_region r ON r.region_id = f.region_id
            JOIN dim_disease d ON d.disease_id = f.disease_id
            WHERE f.year = ?
              AND f.week BETWEEN ? AND ?
              AND f.disease_id IN ({placeholders})
            GROUP BY r.state_name, d.disease_name, f.week
            """,
            [year, start, end, *disease_ids],
        ).fetchall()

    def populations(cur: duckdb.DuckDBPyConnection) -> list:
        return cur.execute(
            f"""
            SELECT r.state_name, p.population
            FROM fact_population_state_year p
            JOIN dim_region r ON r.region_id = p.region_id
            WHERE p.year = {population_year_sql('?')}
            """,
            [year, edge],
        ).fetchall()

    logger.debug(f"Window query year={year} weeks={start}-{end} diseases={disease_ids}")
    with borrow_connection(conn) as c, data_source_errors("weekly rate query"):
        case_rows, pop_rows = fan_out(c, weekly_totals, populations)

    population_by_region = {name: to_optional_int(pop) for name, pop in pop_rows}
    series: Dict[Tuple[str, str], Dict[int, int]] = defaultdict(dict)
    for state_name, disease_name, wk, cases in case_rows:
        series[(state_name, disease_name)][int(wk)] = to_int(cases)

    pop_year = effective_population_year(year, edge)
    records = []
    for (state_name, disease_name), weekly in sorted(series.items()):
        if week not in weekly:
            continue
        population = population_by_region.get(state_name)
        records.append(
            WeeklyRateRecord(
                region_name=state_name,
                disease_name=disease_name,
                year=year,
                week=week,
                window_start=start,
                population_year=pop_year,
                weekly_cases=weekly.get(week, 0),
                population=population,
                cases_per_100k=per_100k(weekly.get(week, 0), population),
                window_max_per_100k=compute_window_max(weekly, population, week, window),
            )
        )
    return records
