"""Demographic dimensions and cells."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from config.constants import DEATH_DEMOGRAPHIC_TYPES
from .errors import ValidationError


class DemographicDimension(Enum):
    """The three demographic axes of the population and death tables."""

    RACE = "race"
    SEX = "sex"
    AGE_GROUP = "age_group"

    @property
    def column(self) -> str:
        """Column holding this dimension in the demographic population table."""
        return self.value

    @property
    def death_type(self) -> str:
        """Label used for this dimension in ``fact_deaths_demographic``."""
        return DEATH_DEMOGRAPHIC_TYPES[self.value]

    @property
    def label(self) -> str:
        return {"race": "Race", "sex": "Sex", "age_group": "Age Group"}[self.value]

    @classmethod
    def parse(cls, tag: str) -> "DemographicDimension":
        """Parse a dimension tag such as ``"race"``, ``"Sex"`` or ``"Age Group"``."""
        if tag is None:
            raise ValidationError("demographic dimension is required", field="dimension")
        normalized = tag.strip().lower().replace(" ", "_").replace("-", "_")
        if normalized in ("race_ethnicity", "race/ethnicity"):
            normalized = "race"
        for member in cls:
            if member.value == normalized:
                return member
        raise ValidationError(
            f"Unknown demographic dimension {tag!r}; expected race, sex or age_group",
            field="dimension",
        )

    @classmethod
    def from_selection(
        cls,
        race: Optional[str] = None,
        sex: Optional[str] = None,
        age_group: Optional[str] = None,
    ) -> Tuple["DemographicDimension", str]:
        """
        Pick the single dimension that was given a value.

        Blank strings count as not given. Exactly one of the three must be set.

        Returns:
            Tuple of (dimension, stripped value).
        """
        provided = [
            (dim, val.strip())
            for dim, val in ((cls.RACE, race), (cls.SEX, sex), (cls.AGE_GROUP, age_group))
            if val is not None and val.strip() != ""
        ]
        if len(provided) != 1:
            raise ValidationError(
                "Exactly one of race, sex or age_group must be provided "
                f"(got {len(provided)})",
                field="dimension",
            )
        return provided[0]


@dataclass(frozen=True)
class DemographicCell:
    """A unique (race, sex, age_group) combination."""

    race: str
    sex: str
    age_group: str
