"""Analysis module for surveillance rates, estimates and comparisons."""

from .errors import (
    AnalyticsError,
    ValidationError,
    NotFoundError,
    DataSourceError,
)
from .demographics import DemographicDimension, DemographicCell
from .rates import (
    RateRecord,
    effective_population_year,
    per_100k,
    get_rates,
    get_region_rate,
    get_top_disease_by_region,
)
from .windows import (
    WeeklyRateRecord,
    window_bounds,
    compute_window_max,
    get_weekly_rates,
)
from .proportional import (
    CellAllocation,
    DemographicEstimate,
    allocate_cases,
    get_estimated_demographic_cases,
    get_demographic_allocation,
)
from .outliers import (
    OutlierRecord,
    mean_and_stddev,
    find_high_outliers,
    get_high_outlier_regions,
)
from .trends import (
    is_strictly_increasing,
    find_rising_entities,
    get_rising_regions,
)
from .exposure import (
    ExposureRecord,
    compute_exposure,
    get_demographic_exposure,
)
from .comparison import (
    AggregationScope,
    NATIONAL,
    ComparisonPoint,
    RegionNationalPoint,
    WeeklyCasePoint,
    compare_scopes,
    compare_region_to_national,
    get_weekly_case_series,
)
from .deaths import (
    DeathShare,
    RegionDeathEstimate,
    age_band,
    get_death_share,
    estimate_region_deaths,
    find_regions_below_national,
    get_regions_below_national_all_races,
)
from .reference import (
    list_regions,
    list_diseases,
    get_demographic_options,
    get_latest_population_year,
)

__all__ = [
    # Errors
    "AnalyticsError",
    "ValidationError",
    "NotFoundError",
    "DataSourceError",
    # Demographics
    "DemographicDimension",
    "DemographicCell",
    # Rates
    "RateRecord",
    "effective_population_year",
    "per_100k",
    "get_rates",
    "get_region_rate",
    "get_top_disease_by_region",
    # Windows
    "WeeklyRateRecord",
    "window_bounds",
    "compute_window_max",
    "get_weekly_rates",
    # Proportional
    "CellAllocation",
    "DemographicEstimate",
    "allocate_cases",
    "get_estimated_demographic_cases",
    "get_demographic_allocation",
    # Outliers
    "OutlierRecord",
    "mean_and_stddev",
    "find_high_outliers",
    "get_high_outlier_regions",
    # Trends
    "is_strictly_increasing",
    "find_rising_entities",
    "get_rising_regions",
    # Exposure
    "ExposureRecord",
    "compute_exposure",
    "get_demographic_exposure",
    # Comparison
    "AggregationScope",
    "NATIONAL",
    "ComparisonPoint",
    "RegionNationalPoint",
    "WeeklyCasePoint",
    "compare_scopes",
    "compare_region_to_national",
    "get_weekly_case_series",
    # Deaths
    "DeathShare",
    "RegionDeathEstimate",
    "age_band",
    "get_death_share",
    "estimate_region_deaths",
    "find_regions_below_national",
    "get_regions_below_national_all_races",
    # Reference
    "list_regions",
    "list_diseases",
    "get_demographic_options",
    "get_latest_population_year",
]
