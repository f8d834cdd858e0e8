"""Configuration module for Epi Analytics."""

from .settings import (
    config,
    Config,
    DatabaseConfig,
    AnalyticsConfig,
    DataConfig,
    AppConfig,
    PROJECT_ROOT,
)
from .constants import (
    PER_CAPITA_SCALE,
    RISING_TREND_SPAN,
    MIN_WEEK,
    MAX_WEEK,
    DEATH_AGE_BANDS,
)

__all__ = [
    # Settings
    "config",
    "Config",
    "DatabaseConfig",
    "AnalyticsConfig",
    "DataConfig",
    "AppConfig",
    "PROJECT_ROOT",
    # Constants
    "PER_CAPITA_SCALE",
    "RISING_TREND_SPAN",
    "MIN_WEEK",
    "MAX_WEEK",
    "DEATH_AGE_BANDS",
]
