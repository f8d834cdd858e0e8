"""API services."""

from api.services.database import get_db, DatabaseService
from api.services.analytics import run_analysis, AnalysisTimeoutError

__all__ = ["get_db", "DatabaseService", "run_analysis", "AnalysisTimeoutError"]
