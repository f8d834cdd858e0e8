"""Pydantic schemas for API responses.

Fields are snake_case in Python and serialized camelCase for the dashboard.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


def to_camel(name: str) -> str:
    """``cases_per_100k`` -> ``casesPer100k``."""
    first, *rest = name.split("_")
    return first + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Reference listings

class StateInfo(CamelModel):
    """A region (state) in the dimension table."""
    state_code: Optional[str] = None
    state_name: str


class DiseaseInfo(CamelModel):
    """A disease in the dimension table."""
    disease_id: int
    disease_name: str


class DemographicOptions(CamelModel):
    """Distinct demographic values with population data."""
    races: list[str]
    sexes: list[str]
    age_groups: list[str]


# Case rates

class YearlyRate(CamelModel):
    """Yearly cases per 100k for one state and disease."""
    state_name: str
    disease_name: str
    year: int
    population_year: int
    total_cases: int
    population: Optional[int] = None
    per_capita_yearly_cases: Optional[float] = Field(None, description="Cases per 100k")


class WeeklyRate(CamelModel):
    """Weekly cases per 100k and the trailing-window maximum."""
    state_name: str
    disease_name: str
    year: int
    week: int
    window_start: int
    weekly_cases: int
    population: Optional[int] = None
    per_capita_weekly_cases: Optional[float] = None
    per_capita_52_week_max: Optional[float] = None


class TopDisease(CamelModel):
    """Highest-rate disease in a state."""
    state_name: str
    disease_name: str
    total_cases: int
    total_population: Optional[int] = None
    cases_per_100k: Optional[float] = None


class DemographicCaseEstimate(CamelModel):
    """Population-proportional case estimate for one demographic cell."""
    state_name: str
    disease_name: str
    year: int
    population_year: int
    race: str
    sex: str
    age_group: str
    population: int
    total_state_population: int
    total_yearly_cases: int
    estimated_demographic_cases: float
    cases_per_100k: Optional[float] = None


class OutlierState(CamelModel):
    """A state with a rate above mean + one standard deviation."""
    state_name: str
    per_capita: float
    avg_rate: float
    std_rate: float


class StateName(CamelModel):
    """A state name result."""
    state_name: str


class DemographicExposure(CamelModel):
    """Share of cases vs share of population for one demographic cell."""
    race: str
    sex: str
    age_group: str
    demo_cases: float
    demo_population: float
    share_of_cases: float
    share_of_population: float
    over_under_exposure: float


class StateNationalPoint(CamelModel):
    """State and national cases per 100k for one year."""
    year: int
    state_cases_per_100k: float
    national_cases_per_100k: float


class WeeklyCases(CamelModel):
    """Case total for one week."""
    year: int
    week: int
    state_name: str
    disease_name: str
    total_cases: int


# Deaths

class DeathShareResponse(CamelModel):
    """Deaths for one demographic value and its percentage of the type total."""
    pathogen: str
    year: int
    race: Optional[str] = None
    sex: Optional[str] = None
    age_group: Optional[str] = None
    demographic_type: str
    demographic_value: str
    total_deaths: int
    sum_of_total_deaths: int
    percent_deaths: float


class EstimatedDeaths(CamelModel):
    """Deaths expected in a state at national age-band death rates."""
    state: str
    year: int
    pathogen: str
    population_year: int
    estimated_deaths: int


# Service

class HealthStatus(BaseModel):
    """Health check response."""
    status: str
    database: str
    regions: Optional[int] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""
    error: str
