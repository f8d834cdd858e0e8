"""Population-proportional allocation of case counts to demographic cells."""

from dataclasses import dataclass
from typing import Dict, Hashable, List, Mapping, Optional, Tuple

import duckdb

from config.constants import RATE_DECIMALS
from config.logging_config import get_logger
from src.database import borrow_connection, to_int
from .concurrency import fan_out
from .demographics import DemographicCell
from .errors import NotFoundError, data_source_errors
from .rates import effective_population_year, per_100k, population_year_sql, resolve_edge_year
from .reference import resolve_disease_by_name, resolve_region
from .validation import require_name, require_year

logger = get_logger("proportional")


@dataclass
class CellAllocation:
    """Estimated cases for one demographic cell."""

    cell: DemographicCell
    population: int
    estimated_cases: float
    cases_per_100k: Optional[float]


@dataclass
class DemographicEstimate:
    """Estimated cases for a single demographic cell of a region."""

    region_name: str
    disease_name: str
    year: int
    population_year: int
    race: str
    sex: str
    age_group: str
    population: int
    total_population: int
    total_cases: int
    estimated_cases: float
    cases_per_100k: Optional[float]


def allocate_cases(
    total_cases: Optional[float],
    populations: Mapping[Hashable, Optional[float]],
) -> Dict[Hashable, float]:
    """
    Split ``total_cases`` across cells in proportion to their population.

    ``estimated_i = population_i / P * C`` where P is the sum of all cell
    populations. A zero P gives 0 for every cell; missing C counts as 0.
    The allocations sum to C.
    """
    cases = total_cases or 0
    total_population = sum((p or 0) for p in populations.values())
    if total_population <= 0:
        return {cell: 0.0 for cell in populations}
    return {
        cell: (pop or 0) / total_population * cases
        for cell, pop in populations.items()
    }


def fetch_case_total(
    cur: duckdb.DuckDBPyConnection, region_id: int, disease_id: int, year: int
) -> int:
    """Total cases for a region, disease and year (0 if none reported)."""
    row = cur.execute(
        """
        SELECT COALESCE(SUM(COALESCE(current_week_cases, 0)), 0)
        FROM fact_cases_weekly
        WHERE region_id = ? AND disease_id = ? AND year = ?
        """,
        [region_id, disease_id, year],
    ).fetchone()
    return to_int(row[0])


def fetch_cell_populations(
    cur: duckdb.DuckDBPyConnection, region_id: int, year: int, edge_year: int
) -> Dict[DemographicCell, int]:
    """Population per demographic cell for a region at the fallback year."""
    rows = cur.execute(
        f"""
        SELECT race, sex, age_group, SUM(COALESCE(population, 0))
        FROM fact_population_state_demo_year
        WHERE region_id = ? AND year = {population_year_sql('?')}
        GROUP BY race, sex, age_group
        ORDER BY race, sex, age_group
        """,
        [region_id, year, edge_year],
    ).fetchall()
    return {
        DemographicCell(race, sex, age_group): to_int(pop)
        for race, sex, age_group, pop in rows
    }


def _load_inputs(
    conn: duckdb.DuckDBPyConnection,
    region_name: str,
    disease_name: str,
    year: int,
    edge: int,
) -> Tuple[int, Dict[DemographicCell, int]]:
    region_id = resolve_region(conn, region_name)
    disease_id = resolve_disease_by_name(conn, disease_name)
    total_cases, populations = fan_out(
        conn,
        lambda cur: fetch_case_total(cur, region_id, disease_id, year),
        lambda cur: fetch_cell_populations(cur, region_id, year, edge),
    )
    return total_cases, populations


def get_estimated_demographic_cases(
    region_name: str,
    disease_name: str,
    year: int,
    race: str,
    sex: str,
    age_group: str,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> DemographicEstimate:
    """
    Estimated cases and cases per 100k for one demographic cell.

    Raises:
        NotFoundError: The region, disease or demographic cell does not exist
            (a cell with population 0 is a valid, zero-valued result).
    """
    require_name(region_name, "region_name")
    require_name(disease_name, "disease_name")
    require_year(year)
    require_name(race, "race")
    require_name(sex, "sex")
    require_name(age_group, "age_group")
    edge = resolve_edge_year(edge_year)
    pop_year = effective_population_year(year, edge)

    with borrow_connection(conn) as c, data_source_errors("demographic estimate"):
        total_cases, populations = _load_inputs(c, region_name, disease_name, year, edge)

    cell = DemographicCell(race, sex, age_group)
    if cell not in populations:
        raise NotFoundError(
            f"No matching demographic population for {region_name} {pop_year} "
            f"({race}, {sex}, {age_group})"
        )

    allocation = allocate_cases(total_cases, populations)
    population = populations[cell]
    rate = per_100k(allocation[cell], population)
    return DemographicEstimate(
        region_name=region_name,
        disease_name=disease_name,
        year=year,
        population_year=pop_year,
        race=race,
        sex=sex,
        age_group=age_group,
        population=population,
        total_population=sum(populations.values()),
        total_cases=total_cases,
        estimated_cases=allocation[cell],
        cases_per_100k=round(rate, RATE_DECIMALS) if rate is not None else None,
    )


def get_demographic_allocation(
    region_name: str,
    disease_name: str,
    year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[CellAllocation]:
    """Estimated cases for every demographic cell of a region."""
    require_name(region_name, "region_name")
    require_name(disease_name, "disease_name")
    require_year(year)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("demographic allocation"):
        total_cases, populations = _load_inputs(c, region_name, disease_name, year, edge)

    allocation = allocate_cases(total_cases, populations)
    return [
        CellAllocation(
            cell=cell,
            population=populations[cell],
            estimated_cases=allocation[cell],
            cases_per_100k=per_100k(allocation[cell], populations[cell]),
        )
        for cell in populations
    ]
