"""Business rules that need runtime values rather than field shape.

Both rules run after structural validation has passed.
"""

from dataclasses import dataclass
from datetime import date

from user_registry.config import Settings
from user_registry.failures import AgeIneligible, IllegalRange


def completed_years(birth_date: date, today: date) -> int:
    """Whole years elapsed; the day before a birthday still counts the previous year."""
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


@dataclass(frozen=True)
class AgePolicy:
    """Minimum age required to register a person."""

    min_age: int

    @classmethod
    def from_settings(cls, config: Settings) -> "AgePolicy":
        return cls(min_age=config.user_min_age)

    def check(self, birth_date: date, today: date) -> AgeIneligible | None:
        if completed_years(birth_date, today) < self.min_age:
            return AgeIneligible(birth_date=birth_date)
        return None


def check_range(date_from: date, date_to: date) -> IllegalRange | None:
    # Strict: equal bounds are rejected too.
    if date_from < date_to:
        return None
    return IllegalRange(date_from=date_from, date_to=date_to)
