"""Case analytics API router."""

from fastapi import APIRouter, Depends, Query

from api.models.schemas import (
    ErrorResponse,
    YearlyRate,
    WeeklyRate,
    TopDisease,
    DemographicCaseEstimate,
    OutlierState,
    StateName,
    DemographicExposure,
    StateNationalPoint,
    WeeklyCases,
)
from api.services.analytics import run_analysis
from api.services.database import DatabaseService, get_db
from src.analysis import (
    ValidationError,
    get_rates,
    get_weekly_rates,
    get_top_disease_by_region,
    get_estimated_demographic_cases,
    get_high_outlier_regions,
    get_rising_regions,
    get_demographic_exposure,
    compare_region_to_national,
    get_weekly_case_series,
)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)


def parse_id_list(raw: str, field: str = "diseaseIds") -> list[int]:
    """Parse a comma-separated id list such as ``"1,2,3"``."""
    ids = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            ids.append(int(token))
        except ValueError:
            raise ValidationError(f"{field} must be comma-separated integers, got {token!r}", field=field) from None
    if not ids:
        raise ValidationError(f"{field} must contain at least one id", field=field)
    return ids


@router.get("/state-yearly-percapita", response_model=list[YearlyRate])
async def state_yearly_percapita(
    year: int = Query(..., description="Case year"),
    disease_id: int = Query(..., alias="diseaseId"),
    db: DatabaseService = Depends(get_db),
):
    """Yearly cases per 100k for every state, highest first."""
    records = await run_analysis(db, get_rates, year, [disease_id])
    return [
        YearlyRate(
            state_name=r.region_name,
            disease_name=r.disease_name,
            year=r.year,
            population_year=r.population_year,
            total_cases=r.total_cases,
            population=r.population,
            per_capita_yearly_cases=r.cases_per_100k,
        )
        for r in records
    ]


@router.get("/state-weekly-percapita", response_model=list[WeeklyRate])
async def state_weekly_percapita(
    year: int = Query(...),
    week: int = Query(..., description="Week of year (1-52)"),
    disease_ids: str = Query(..., alias="diseaseIds", description="Comma-separated disease ids"),
    db: DatabaseService = Depends(get_db),
):
    """Weekly cases per 100k and the trailing 52-week maximum."""
    records = await run_analysis(db, get_weekly_rates, year, week, parse_id_list(disease_ids))
    return [
        WeeklyRate(
            state_name=r.region_name,
            disease_name=r.disease_name,
            year=r.year,
            week=r.week,
            window_start=r.window_start,
            weekly_cases=r.weekly_cases,
            population=r.population,
            per_capita_weekly_cases=r.cases_per_100k,
            per_capita_52_week_max=r.window_max_per_100k,
        )
        for r in records
    ]


@router.get("/top-states-by-disease", response_model=list[TopDisease])
async def top_states_by_disease(
    year: int = Query(...),
    db: DatabaseService = Depends(get_db),
):
    """The highest-rate disease in each state."""
    records = await run_analysis(db, get_top_disease_by_region, year)
    return [
        TopDisease(
            state_name=r.region_name,
            disease_name=r.disease_name,
            total_cases=r.total_cases,
            total_population=r.population,
            cases_per_100k=r.cases_per_100k,
        )
        for r in records
    ]


@router.get("/estimated-demographic-cases", response_model=DemographicCaseEstimate)
async def estimated_demographic_cases(
    state_name: str = Query(..., alias="stateName"),
    disease_name: str = Query(..., alias="diseaseName"),
    year: int = Query(...),
    race: str = Query(...),
    sex: str = Query(...),
    age_group: str = Query(..., alias="ageGroup"),
    db: DatabaseService = Depends(get_db),
):
    """Cases allocated to one demographic cell in proportion to its population."""
    e = await run_analysis(
        db, get_estimated_demographic_cases, state_name, disease_name, year, race, sex, age_group
    )
    return DemographicCaseEstimate(
        state_name=e.region_name,
        disease_name=e.disease_name,
        year=e.year,
        population_year=e.population_year,
        race=e.race,
        sex=e.sex,
        age_group=e.age_group,
        population=e.population,
        total_state_population=e.total_population,
        total_yearly_cases=e.total_cases,
        estimated_demographic_cases=e.estimated_cases,
        cases_per_100k=e.cases_per_100k,
    )


@router.get("/states-high-outliers", response_model=list[OutlierState])
async def states_high_outliers(
    disease_name: str = Query(..., alias="diseaseName"),
    year: int = Query(...),
    db: DatabaseService = Depends(get_db),
):
    """States whose rate exceeds the mean by more than one standard deviation."""
    outliers = await run_analysis(db, get_high_outlier_regions, disease_name, year)
    return [
        OutlierState(state_name=o.name, per_capita=o.rate, avg_rate=o.mean, std_rate=o.stddev)
        for o in outliers
    ]


@router.get("/states-rising-4years", response_model=list[StateName])
async def states_rising_4years(
    disease_name: str = Query(..., alias="diseaseName"),
    start_year: int = Query(..., alias="startYear"),
    end_year: int = Query(..., alias="endYear"),
    db: DatabaseService = Depends(get_db),
):
    """States whose rate rose in each year of a four-year window."""
    names = await run_analysis(db, get_rising_regions, disease_name, start_year, end_year)
    return [StateName(state_name=name) for name in names]


@router.get("/state-demographic-overunder", response_model=list[DemographicExposure])
async def state_demographic_overunder(
    state_name: str = Query(..., alias="stateName"),
    disease_name: str = Query(..., alias="diseaseName"),
    year: int = Query(...),
    db: DatabaseService = Depends(get_db),
):
    """Share of cases minus share of population for each demographic cell."""
    records = await run_analysis(db, get_demographic_exposure, state_name, disease_name, year)
    return [
        DemographicExposure(
            race=r.cell.race,
            sex=r.cell.sex,
            age_group=r.cell.age_group,
            demo_cases=r.cases,
            demo_population=r.population,
            share_of_cases=r.share_of_cases,
            share_of_population=r.share_of_population,
            over_under_exposure=r.over_under_exposure,
        )
        for r in records
    ]


@router.get("/state-vs-national-trend", response_model=list[StateNationalPoint])
async def state_vs_national_trend(
    state_name: str = Query(..., alias="stateName"),
    disease_name: str = Query(..., alias="diseaseName"),
    start_year: int = Query(..., alias="startYear"),
    end_year: int = Query(..., alias="endYear"),
    db: DatabaseService = Depends(get_db),
):
    """Yearly state rate next to the national rate."""
    points = await run_analysis(
        db, compare_region_to_national, state_name, disease_name, start_year, end_year
    )
    return [
        StateNationalPoint(
            year=p.year,
            state_cases_per_100k=p.region_per_100k,
            national_cases_per_100k=p.national_per_100k,
        )
        for p in points
    ]


@router.get("/state-vs-national-trend-weekly", response_model=list[WeeklyCases])
async def state_vs_national_trend_weekly(
    state_name: str = Query(..., alias="stateName"),
    disease_name: str = Query(..., alias="diseaseName"),
    db: DatabaseService = Depends(get_db),
):
    """Weekly case totals for a state and disease."""
    points = await run_analysis(db, get_weekly_case_series, state_name, disease_name)
    return [
        WeeklyCases(
            year=p.year,
            week=p.week,
            state_name=state_name,
            disease_name=disease_name,
            total_cases=p.total_cases,
        )
        for p in points
    ]
