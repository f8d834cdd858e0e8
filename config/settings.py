"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    path: Path = field(
        default_factory=lambda: Path(
            os.getenv("EPI_DB_PATH", str(PROJECT_ROOT / "data" / "epi.duckdb"))
        )
    )
    read_only: bool = False
    memory_limit: str = "4GB"
    threads: int = -1  # Use all available threads


@dataclass
class AnalyticsConfig:
    """Settings shared by the analytical components."""

    # Last year with population data; later years fall back to it
    population_edge_year: int = field(
        default_factory=lambda: int(os.getenv("EPI_POPULATION_EDGE_YEAR", "2023"))
    )
    window_weeks: int = field(
        default_factory=lambda: int(os.getenv("EPI_WINDOW_WEEKS", "52"))
    )
    max_parallel_queries: int = field(
        default_factory=lambda: int(os.getenv("EPI_MAX_PARALLEL_QUERIES", "4"))
    )


@dataclass
class DataConfig:
    """Data paths configuration."""

    raw_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("RAW_DATA_PATH", str(PROJECT_ROOT / "data" / "raw"))
        )
    )


@dataclass
class AppConfig:
    """Application configuration settings."""

    name: str = field(default_factory=lambda: os.getenv("APP_NAME", "Epi Analytics"))
    version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    query_timeout: int = field(
        default_factory=lambda: int(os.getenv("QUERY_TIMEOUT_SECONDS", "60"))
    )
    cache_ttl: int = field(
        default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600"))
    )


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    data: DataConfig = field(default_factory=DataConfig)
    app: AppConfig = field(default_factory=AppConfig)


# Global config instance
config = Config()
