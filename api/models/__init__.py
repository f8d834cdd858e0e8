"""API Pydantic models."""

from api.models.schemas import (
    StateInfo,
    DiseaseInfo,
    DemographicOptions,
    YearlyRate,
    WeeklyRate,
    TopDisease,
    DemographicCaseEstimate,
    OutlierState,
    StateName,
    DemographicExposure,
    StateNationalPoint,
    WeeklyCases,
    DeathShareResponse,
    EstimatedDeaths,
    HealthStatus,
    ErrorResponse,
)

__all__ = [
    "StateInfo",
    "DiseaseInfo",
    "DemographicOptions",
    "YearlyRate",
    "WeeklyRate",
    "TopDisease",
    "DemographicCaseEstimate",
    "OutlierState",
    "StateName",
    "DemographicExposure",
    "StateNationalPoint",
    "WeeklyCases",
    "DeathShareResponse",
    "EstimatedDeaths",
    "HealthStatus",
    "ErrorResponse",
]
