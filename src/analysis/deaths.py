"""Death-count analyses by demographic group and region."""

import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import duckdb
import pandas as pd

from config.constants import DEATH_AGE_BANDS
from config.logging_config import get_logger
from src.database import borrow_connection, to_int
from .concurrency import fan_out
from .demographics import DemographicDimension
from .errors import NotFoundError, data_source_errors
from .rates import effective_population_year, population_year_sql, resolve_edge_year
from .reference import resolve_disease_by_name, resolve_region
from .validation import require_name, require_year

logger = get_logger("deaths")

_LEADING_AGE = re.compile(r"^\s*(\d+)")


@dataclass
class DeathShare:
    """Deaths in one demographic group as a share of all groups of that type."""

    disease_name: str
    year: int
    dimension: DemographicDimension
    value: str
    total_deaths: int
    all_deaths: int
    percent_deaths: float


@dataclass
class RegionDeathEstimate:
    """Deaths expected in a region if it had the national age-band death rates."""

    region_name: str
    disease_name: str
    year: int
    population_year: int
    estimated_deaths: int
    band_rates: Dict[str, float] = field(default_factory=dict)


def age_band(age_group: str) -> Optional[str]:
    """
    Map a population age group (``"0"``, ``"5-9"``, ``"85+"``) to a death-data band.

    Returns ``None`` for labels without a leading age.
    """
    if age_group is None:
        return None
    match = _LEADING_AGE.match(age_group)
    if not match:
        return None
    lower = int(match.group(1))
    for band, (low, high) in DEATH_AGE_BANDS.items():
        if lower >= low and (high is None or lower <= high):
            return band
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_death_share(
    disease_name: str,
    year: int,
    dimension: DemographicDimension,
    value: str,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
) -> DeathShare:
    """
    Deaths for one demographic value and their percentage of all values of
    the same demographic type.

    Raises:
        NotFoundError: The disease is unknown or the demographic value never
            appears for that demographic type.
    """
    require_name(disease_name, "disease_name")
    require_year(year)
    require_name(value, dimension.value)

    def group_total(cur: duckdb.DuckDBPyConnection) -> int:
        row = cur.execute(
            """
            SELECT COALESCE(SUM(deaths), 0)
            FROM fact_deaths_demographic
            WHERE disease_id = ? AND year = ?
              AND demographic_type = ? AND demographic_value = ?
            """,
            [disease_id, year, dimension.death_type, value],
        ).fetchone()
        return to_int(row[0])

    def type_total(cur: duckdb.DuckDBPyConnection) -> int:
        row = cur.execute(
            """
            SELECT COALESCE(SUM(deaths), 0)
            FROM fact_deaths_demographic
            WHERE disease_id = ? AND year = ? AND demographic_type = ?
            """,
            [disease_id, year, dimension.death_type],
        ).fetchone()
        return to_int(row[0])

    with borrow_connection(conn) as c, data_source_errors("death share query"):
        disease_id = resolve_disease_by_name(c, disease_name)
        known = c.execute(
            """
            SELECT 1 FROM fact_deaths_demographic
            WHERE demographic_type = ? AND demographic_value = ?
            LIMIT 1
            """,
            [dimension.death_type, value],
        ).fetchone()
        if known is None:
            raise NotFoundError(f"Unknown {dimension.label} value: {value!r}")
        total, all_total = fan_out(c, group_total, type_total)

    return DeathShare(
        disease_name=disease_name,
        year=year,
        dimension=dimension,
        value=value,
        total_deaths=total,
        all_deaths=all_total,
        percent_deaths=(total / all_total * 100) if all_total else 0.0,
    )


def _band_populations(rows) -> Dict[str, int]:
    bands: Dict[str, int] = {}
    for age_group, population in rows:
        band = age_band(age_group)
        if band is None:
            logger.debug(f"Skipping unmapped age group {age_group!r}")
            continue
        bands[band] = bands.get(band, 0) + to_int(population)
    return bands


def estimate_region_deaths(
    disease_name: str,
    year: int,
    region_name: str,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> RegionDeathEstimate:
    """
    Estimate a region's deaths by applying national age-band death rates to the
    region's age-band population.

    ``estimate = sum(region_pop[band] * national_deaths[band] / national_pop[band])``.
    Bands with no national population are skipped.
    """
    require_name(disease_name, "disease_name")
    require_name(region_name, "region_name")
    require_year(year)
    edge = resolve_edge_year(edge_year)

    def band_deaths(cur: duckdb.DuckDBPyConnection) -> Dict[str, int]:
        rows = cur.execute(
            """
            SELECT demographic_value, COALESCE(SUM(deaths), 0)
            FROM fact_deaths_demographic
            WHERE disease_id = ? AND year = ? AND demographic_type = ?
            GROUP BY demographic_value
            """,
            [disease_id, year, DemographicDimension.AGE_GROUP.death_type],
        ).fetchall()
        return {value: to_int(total) for value, total in rows}

    def national_population(cur: duckdb.DuckDBPyConnection) -> Dict[str, int]:
        rows = cur.execute(
            f"""
            SELECT age_group, SUM(population)
            FROM fact_population_state_demo_year
            WHERE year = {population_year_sql('?')}
            GROUP BY age_group
            """,
            [year, edge],
        ).fetchall()
        return _band_populations(rows)

    def region_population(cur: duckdb.DuckDBPyConnection) -> Dict[str, int]:
        rows = cur.execute(
            f"""
            SELECT age_group, SUM(population)
            FROM fact_population_state_demo_year
            WHERE region_id = ? AND year = {population_year_sql('?')}
            GROUP BY age_group
            """,
            [region_id, year, edge],
        ).fetchall()
        return _band_populations(rows)

    with borrow_connection(conn) as c, data_source_errors("death estimate query"):
        disease_id = resolve_disease_by_name(c, disease_name)
        region_id = resolve_region(c, region_name)
        deaths, national_pop, region_pop = fan_out(
            c, band_deaths, national_population, region_population
        )

    band_rates = {
        band: deaths[band] / national_pop[band]
        for band in deaths
        if national_pop.get(band, 0) > 0
    }
    estimate = math.fsum(
        region_pop.get(band, 0) * rate for band, rate in band_rates.items()
    )
    return RegionDeathEstimate(
        region_name=region_name,
        disease_name=disease_name,
        year=year,
        population_year=effective_population_year(year, edge),
        estimated_deaths=_round_half_up(estimate),
        band_rates=band_rates,
    )


def find_regions_below_national(deaths: pd.DataFrame, population: pd.DataFrame) -> List[str]:
    """
    Regions whose death rate is below the national rate for every race they report.

    Args:
        deaths: Columns ``region_name, race, deaths``.
        population: Columns ``region_name, race, population`` covering all regions.

    National and regional rates are both total deaths over total population
    for the race, summed over the (region, race) pairs that have both deaths
    and a positive population. Races where the region's rate is undefined are
    not compared. Sorted by name.
    """
    if deaths.empty or population.empty:
        return []

    regional = deaths.groupby(["region_name", "race"], as_index=False)["deaths"].sum().merge(
        population.groupby(["region_name", "race"], as_index=False)["population"].sum(),
        on=["region_name", "race"],
        how="inner",
    )
    regional = regional[regional["population"] > 0].copy()
    regional["rate"] = regional["deaths"] / regional["population"]

    national = regional.groupby("race")[["deaths", "population"]].sum()
    national["national_rate"] = national["deaths"] / national["population"]
    regional = regional.merge(
        national[["national_rate"]], left_on="race", right_index=True, how="inner"
    )
    if regional.empty:
        return []

    regional["below"] = regional["rate"] < regional["national_rate"]
    below_all = regional.groupby("region_name")["below"].all()
    return sorted(below_all[below_all].index.tolist())


def get_regions_below_national_all_races(
    disease_name: str,
    year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[str]:
    """Regions with a below-national death rate for every race, for a disease and year."""
    require_name(disease_name, "disease_name")
    require_year(year)
    edge = resolve_edge_year(edge_year)

    def region_deaths(cur: duckdb.DuckDBPyConnection) -> pd.DataFrame:
        return cur.execute(
            """
            SELECT r.state_name AS region_name, d.race, SUM(COALESCE(d.deaths, 0)) AS deaths
            FROM fact_deaths_region d
            JOIN dim_region r ON r.region_id = d.region_id
            WHERE d.disease_id = ? AND d.year = ?
            GROUP BY r.state_name, d.race
            """,
            [disease_id, year],
        ).df()

    def region_population(cur: duckdb.DuckDBPyConnection) -> pd.DataFrame:
        return cur.execute(
            f"""
            SELECT r.state_name AS region_name, p.race, SUM(COALESCE(p.population, 0)) AS population
            FROM fact_population_state_demo_year p
            JOIN dim_region r ON r.region_id = p.region_id
            WHERE p.year = {population_year_sql('?')}
            GROUP BY r.state_name, p.race
            """,
            [year, edge],
        ).df()

    with borrow_connection(conn) as c, data_source_errors("below-national query"):
        disease_id = resolve_disease_by_name(c, disease_name)
        deaths, population = fan_out(c, region_deaths, region_population)

    deaths["deaths"] = [to_int(v) for v in deaths["deaths"]]
    population["population"] = [to_int(v) for v in population["population"]]
    return find_regions_below_national(deaths, population)
