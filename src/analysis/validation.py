"""Parameter validation for analytics operations.

Each check raises ``ValidationError`` before any query is issued.
"""

from typing import Iterable, List, Optional

from config.constants import MIN_WEEK, MAX_WEEK
from .errors import ValidationError


def require_name(value: Optional[str], field: str) -> str:
    """Require a non-empty string; returned unchanged (names match exactly)."""
    if value is None or not isinstance(value, str) or value.strip() == "":
        raise ValidationError(f"{field} must be a non-empty string", field=field)
    return value


def require_year(value, field: str = "year") -> int:
    """Require an integer year."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    return value


def require_week(value, field: str = "week") -> int:
    """Require an integer week in [1, 52]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if not MIN_WEEK <= value <= MAX_WEEK:
        raise ValidationError(
            f"{field} must be between {MIN_WEEK} and {MAX_WEEK}, got {value}",
            field=field,
        )
    return value


def require_ids(values: Iterable, field: str = "disease_ids") -> List[int]:
    """Require a non-empty collection of integer ids."""
    ids = list(values) if values is not None else []
    if not ids:
        raise ValidationError(f"{field} must contain at least one id", field=field)
    for v in ids:
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValidationError(f"{field} must contain integers, got {v!r}", field=field)
    return ids


def require_year_range(start_year, end_year) -> tuple:
    """Require integer years with end_year >= start_year."""
    require_year(start_year, "start_year")
    require_year(end_year, "end_year")
    if end_year < start_year:
        raise ValidationError(
            f"end_year ({end_year}) must not be before start_year ({start_year})",
            field="end_year",
        )
    return start_year, end_year


def require_fixed_span(start_year, end_year, span: int) -> tuple:
    """Require end_year - start_year to equal ``span`` exactly."""
    require_year_range(start_year, end_year)
    if end_year - start_year != span:
        raise ValidationError(
            f"year range must span exactly {span + 1} years "
            f"(end_year = start_year + {span}), got {start_year}-{end_year}",
            field="end_year",
        )
    return start_year, end_year


def require_positive(value, field: str) -> int:
    """Require a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer", field=field)
    return value
