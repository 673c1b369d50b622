"""
Comparison period models.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DateWindow(BaseModel):
    """
    A closed date interval.

    Ordering of ``date_from`` and ``date_to`` is not enforced here; the
    period validator reports inverted ranges instead.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_from: dt.date = Field(description="First day of the window (inclusive)")
    date_to: dt.date = Field(description="Last day of the window (inclusive)")

    def overlaps(self, other: "DateWindow") -> bool:
        """Closed-interval overlap: sharing a single day counts."""
        return self.date_to >= other.date_from and self.date_from <= other.date_to

    @property
    def days(self) -> int:
        """Number of calendar days covered, 0 for an inverted range."""
        return max((self.date_to - self.date_from).days + 1, 0)


class Period(DateWindow):
    """
    A named date window selected for comparison.

    Attributes:
        id: Positional number of the period (1-based)
        name: Display name, "период №<id>"
        date_from: First day of the window (inclusive)
        date_to: Last day of the window (inclusive)
    """

    id: int = Field(ge=1, description="Positional number of the period")
    name: str = Field(description="Display name of the period")


class PeriodValidationResult(BaseModel):
    """
    Outcome of validating a period set.

    Attributes:
        valid: Whether the set can be used for comparison
        reason: Short machine-readable reason when invalid
        invalid_indices: Positions of periods that failed to parse or are inverted
        conflicts: Index pairs (i, j), i < j, of overlapping periods
    """

    valid: bool
    reason: Optional[str] = None
    invalid_indices: list[int] = Field(default_factory=list)
    conflicts: list[tuple[int, int]] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid
