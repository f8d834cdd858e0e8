"""Death analytics API router."""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from api.models.schemas import DeathShareResponse, ErrorResponse, EstimatedDeaths, StateName
from api.services.analytics import run_analysis
from api.services.database import DatabaseService, get_db
from src.analysis import (
    DemographicDimension,
    get_death_share,
    estimate_region_deaths,
    get_regions_below_national_all_races,
)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)


@router.get("/deaths-by-pathogen-demographic", response_model=DeathShareResponse)
async def deaths_by_pathogen_demographic(
    pathogen: str = Query(..., description="Disease name"),
    year: int = Query(...),
    race: Optional[str] = Query(None),
    sex: Optional[str] = Query(None),
    age_group: Optional[str] = Query(None, alias="ageGroup"),
    db: DatabaseService = Depends(get_db),
):
    """Deaths for exactly one of race, sex or ageGroup and its share of the type total."""
    dimension, value = DemographicDimension.from_selection(race=race, sex=sex, age_group=age_group)
    share = await run_analysis(db, get_death_share, pathogen, year, dimension, value)
    return DeathShareResponse(
        pathogen=share.disease_name,
        year=share.year,
        race=value if dimension is DemographicDimension.RACE else None,
        sex=value if dimension is DemographicDimension.SEX else None,
        age_group=value if dimension is DemographicDimension.AGE_GROUP else None,
        demographic_type=dimension.death_type,
        demographic_value=share.value,
        total_deaths=share.total_deaths,
        sum_of_total_deaths=share.all_deaths,
        percent_deaths=share.percent_deaths,
    )


@router.get("/estimated-deaths-by-state", response_model=EstimatedDeaths)
async def estimated_deaths_by_state(
    pathogen: str = Query(..., description="Disease name"),
    year: int = Query(...),
    state: str = Query(..., description="State name"),
    db: DatabaseService = Depends(get_db),
):
    """State deaths expected at national age-band death rates."""
    estimate = await run_analysis(db, estimate_region_deaths, pathogen, year, state)
    return EstimatedDeaths(
        state=estimate.region_name,
        year=estimate.year,
        pathogen=estimate.disease_name,
        population_year=estimate.population_year,
        estimated_deaths=estimate.estimated_deaths,
    )


@router.get("/states-below-national-all-races", response_model=list[StateName])
async def states_below_national_all_races(
    disease_name: str = Query(..., alias="diseaseName"),
    year: int = Query(...),
    db: DatabaseService = Depends(get_db),
):
    """States with a below-national death rate for every race."""
    names = await run_analysis(db, get_regions_below_national_all_races, disease_name, year)
    return [StateName(state_name=name) for name in names]
