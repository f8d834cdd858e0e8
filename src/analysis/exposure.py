"""Demographic over/under-exposure: share of cases minus share of population."""

import math
from dataclasses import dataclass
from typing import Hashable, Iterable, List, Optional, Tuple

import duckdb

from config.constants import SHARE_DECIMALS
from config.logging_config import get_logger
from src.database import borrow_connection
from .concurrency import fan_out
from .errors import data_source_errors
from .proportional import allocate_cases, fetch_case_total, fetch_cell_populations
from .rates import effective_population_year, resolve_edge_year
from .reference import resolve_disease_by_name, resolve_region
from .validation import require_name, require_year

logger = get_logger("exposure")

SUM_TOLERANCE = 1e-9


@dataclass
class ExposureRecord:
    """Case and population shares for one demographic cell."""

    cell: Hashable
    cases: float
    population: float
    share_of_cases: float
    share_of_population: float
    over_under_exposure: float


def _share(part: float, total: float) -> float:
    return part / total if total > 0 else 0.0


def _check_sum(name: str, values: List[float], expected: float) -> None:
    total = math.fsum(values)
    if abs(total - expected) > SUM_TOLERANCE * max(1.0, len(values)):
        logger.warning(f"{name} sums to {total!r}, expected {expected}")


def compute_exposure(
    cells: Iterable[Tuple[Hashable, Optional[float], Optional[float]]],
    decimals: Optional[int] = SHARE_DECIMALS,
) -> List[ExposureRecord]:
    """
    Share of cases, share of population and their difference per cell.

    Args:
        cells: ``(cell, cases, population)`` triples. Missing values count as 0.
        decimals: Rounding applied to the output shares; ``None`` keeps full
            precision.

    A zero case total makes every case share 0, and likewise for population.
    Sum invariants (shares sum to 1, exposures to 0) are checked on the
    unrounded values.
    """
    triples = [(cell, cases or 0, pop or 0) for cell, cases, pop in cells]
    total_cases = math.fsum(c for _, c, _ in triples)
    total_population = math.fsum(p for _, _, p in triples)

    raw = [
        (cell, cases, pop, _share(cases, total_cases), _share(pop, total_population))
        for cell, cases, pop in triples
    ]

    if total_cases > 0:
        _check_sum("share_of_cases", [r[3] for r in raw], 1.0)
    if total_population > 0:
        _check_sum("share_of_population", [r[4] for r in raw], 1.0)
    if total_cases > 0 and total_population > 0:
        _check_sum("over_under_exposure", [r[3] - r[4] for r in raw], 0.0)

    def out(value: float) -> float:
        return round(value, decimals) if decimals is not None else value

    return [
        ExposureRecord(
            cell=cell,
            cases=cases,
            population=pop,
            share_of_cases=out(share_cases),
            share_of_population=out(share_pop),
            over_under_exposure=out(share_cases - share_pop),
        )
        for cell, cases, pop, share_cases, share_pop in raw
    ]


def get_demographic_exposure(
    region_name: str,
    disease_name: str,
    year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[ExposureRecord]:
    """
    Over/under-exposure for every demographic cell of a region.

    Cases are allocated to cells in proportion to population; the population
    shares come from the demographic population table at the fallback year.
    """
    require_name(region_name, "region_name")
    require_name(disease_name, "disease_name")
    require_year(year)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("exposure query"):
        region_id = resolve_region(c, region_name)
        disease_id = resolve_disease_by_name(c, disease_name)
        total_cases, populations = fan_out(
            c,
            lambda cur: fetch_case_total(cur, region_id, disease_id, year),
            lambda cur: fetch_cell_populations(cur, region_id, year, edge),
        )

    logger.debug(
        f"Exposure for {region_name}/{disease_name}/{year} "
        f"(population year {effective_population_year(year, edge)}): "
        f"{total_cases} cases over {len(populations)} cells"
    )
    allocation = allocate_cases(total_cases, populations)
    return compute_exposure(
        (cell, allocation[cell], populations[cell]) for cell in populations
    )
