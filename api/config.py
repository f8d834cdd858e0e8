"""FastAPI application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache

from config import config


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App info
    app_name: str = "Epi Analytics API"
    version: str = config.app.version
    debug: bool = False

    # Database
    database_path: Path = config.database.path

    # CORS, comma-separated
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Per-request limit for an analytics call
    request_timeout_seconds: float = float(config.app.query_timeout)

    # Cache for reference listings
    cache_ttl_seconds: int = config.app.cache_ttl

    class Config:
        env_prefix = "EPI_"

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
