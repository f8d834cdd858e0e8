"""Constants for Epi Analytics."""

from typing import Dict

# =============================================================================
# Rate Scaling
# =============================================================================

# Per-capita outputs are always expressed as cases per 100,000 population
PER_CAPITA_SCALE = 100_000


# =============================================================================
# Calendar
# =============================================================================

MIN_WEEK = 1
MAX_WEEK = 52

# Rising-trend window: end_year - start_year must equal this (4 years inclusive)
RISING_TREND_SPAN = 3


# =============================================================================
# Output Precision
# =============================================================================

SHARE_DECIMALS = 4
RATE_DECIMALS = 2


# =============================================================================
# Death Data
# =============================================================================

# Age bands used by the demographic death table
DEATH_AGE_BANDS: Dict[str, tuple] = {
    "0-17 years": (0, 17),
    "18-64 years": (18, 64),
    "65+ years": (65, None),
}

# Labels used in fact_deaths_demographic.demographic_type
DEATH_DEMOGRAPHIC_TYPES = {
    "race": "Race/Ethnicity",
    "sex": "Sex",
    "age_group": "Age Group",
}
