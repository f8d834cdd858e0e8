"""Numeric coercion for values read from the data source.

DuckDB hands back ``int`` for HUGEINT sums, ``Decimal`` for DECIMAL
arithmetic and numpy scalars when results go through a DataFrame. The
analytics code only works with native ``int``/``float``; every aggregate read
from a query passes through these helpers.
"""

import math
from decimal import Decimal
from typing import Any, Optional

import numpy as np
import pandas as pd


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, (float, np.floating)) and math.isnan(value):
        return True
    return False


def to_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Coerce a count (possibly NULL, Decimal or numpy) to ``int``."""
    if _is_missing(value):
        return default
    if isinstance(value, Decimal):
        return int(value.to_integral_value())
    return int(value)


def to_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Coerce a numeric value to ``float``; NULL/NaN becomes ``default``."""
    if _is_missing(value):
        return default
    return float(value)


def to_optional_float(value: Any) -> Optional[float]:
    """Coerce to ``float`` while keeping NULL/NaN as ``None``."""
    return to_float(value, default=None)


def to_optional_int(value: Any) -> Optional[int]:
    """Coerce to ``int`` while keeping NULL as ``None``."""
    return to_int(value, default=None)
