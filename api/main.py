"""Epi Analytics FastAPI Application."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from api.config import get_settings
from api.models.schemas import HealthStatus
from api.routers import analytics, deaths, reference
from api.services.analytics import AnalysisTimeoutError
from api.services.database import DatabaseService, close_db, get_db
from config.logging_config import get_logger
from src.analysis.errors import DataSourceError, NotFoundError, ValidationError

settings = get_settings()
logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="API for weekly notifiable-disease surveillance analytics",
    lifespan=lifespan,
)


class CacheHeaderMiddleware(BaseHTTPMiddleware):
    """Middleware to add Cache-Control headers to responses."""

    # Endpoints that can be cached
    CACHEABLE_PATHS = {
        "/api/states": 1800,  # 30 minutes
        "/api/diseases": 1800,  # 30 minutes
        "/api/demographic-options": 1800,  # 30 minutes
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if request.method != "GET":
            return response

        path = request.url.path
        max_age = self.CACHEABLE_PATHS.get(path)
        if max_age is not None and response.status_code == 200:
            response.headers["Cache-Control"] = f"public, max-age={max_age}"
        else:
            response.headers["Cache-Control"] = "no-cache"

        return response


app.add_middleware(CacheHeaderMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError):
    logger.error(f"Error in {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(AnalysisTimeoutError)
async def timeout_handler(request: Request, exc: AnalysisTimeoutError):
    return JSONResponse(status_code=504, content={"error": "Query timed out"})


app.include_router(reference.router, prefix="/api", tags=["Reference"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(deaths.router, prefix="/api", tags=["Deaths"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthStatus)
async def health_check(db: DatabaseService = Depends(get_db)):
    """Health check endpoint."""
    try:
        count = db.fetch_one("SELECT COUNT(*) FROM dim_region")[0]
        return HealthStatus(status="healthy", database="connected", regions=count)
    except Exception as e:
        return HealthStatus(status="unhealthy", database="disconnected", error=str(e))
