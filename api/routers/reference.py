"""Reference listing API router."""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from api.models.schemas import StateInfo, DiseaseInfo, DemographicOptions
from api.services.analytics import run_analysis
from api.services.cache import reference_cache, make_cache_key
from api.services.database import DatabaseService, get_db
from src.analysis import list_regions, list_diseases, get_demographic_options

router = APIRouter()


async def _cached(key: str, db: DatabaseService, func, **kwargs):
    value = reference_cache.get(key)
    if value is None:
        value = await run_analysis(db, func, **kwargs)
        reference_cache.set(key, value)
    return value


@router.get("/states", response_model=list[StateInfo])
async def get_states(db: DatabaseService = Depends(get_db)):
    """List all states ordered by name."""
    rows = await _cached(make_cache_key("states"), db, list_regions)
    return [StateInfo(**row) for row in rows]


@router.get("/diseases", response_model=list[DiseaseInfo])
async def get_diseases(
    year: Optional[int] = Query(None, description="Only diseases with cases in this year"),
    db: DatabaseService = Depends(get_db),
):
    """List diseases ordered by name."""
    rows = await _cached(make_cache_key("diseases", year), db, list_diseases, year=year)
    return [DiseaseInfo(**row) for row in rows]


@router.get("/demographic-options", response_model=DemographicOptions)
async def get_options(db: DatabaseService = Depends(get_db)):
    """Distinct races, sexes and age groups."""
    options = await _cached(make_cache_key("demographic-options"), db, get_demographic_options)
    return DemographicOptions(**options)
