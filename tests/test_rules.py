"""Unit tests for the age and range business rules."""

from datetime import date

import pytest

from user_registry.config import Settings
from user_registry.failures import AgeIneligible, IllegalRange, Problem
from user_registry.rules import AgePolicy, check_range, completed_years

TODAY = date(2024, 6, 15)


@pytest.mark.parametrize(
    "birth_date, today, expected",
    [
        (date(2006, 6, 15), date(2024, 6, 15), 18),
        (date(2006, 6, 16), date(2024, 6, 15), 17),
        (date(2006, 7, 1), date(2024, 6, 15), 17),
        (date(2004, 2, 29), date(2022, 2, 28), 17),
        (date(2004, 2, 29), date(2022, 3, 1), 18),
        (date(2024, 6, 14), date(2024, 6, 15), 0),
    ],
    ids=[
        "birthday_today",
        "birthday_tomorrow",
        "birthday_next_month",
        "leap_day_before",
        "leap_day_after",
        "newborn",
    ],
)
def test_completed_years(birth_date: date, today: date, expected: int) -> None:
    assert completed_years(birth_date, today) == expected


def test_adult_passes_age_policy() -> None:
    assert AgePolicy(min_age=18).check(date(2006, 6, 15), TODAY) is None


def test_person_turning_18_tomorrow_is_too_young() -> None:
    failure = AgePolicy(min_age=18).check(date(2006, 6, 16), TODAY)

    assert failure == AgeIneligible(birth_date=date(2006, 6, 16))
    assert failure.problems() == [
        Problem(
            message="You are too young to register. Your birthday is at '2006-06-16'",
            field="birthDate",
            wrong_value="2006-06-16",
        )
    ]


def test_age_policy_threshold_comes_from_settings() -> None:
    policy = AgePolicy.from_settings(Settings(user_min_age=21))

    assert policy.min_age == 21
    assert policy.check(date(2004, 1, 1), TODAY) is not None


def test_zero_min_age_accepts_everyone_born() -> None:
    assert AgePolicy(min_age=0).check(date(2024, 6, 14), TODAY) is None


def test_ordered_range_passes() -> None:
    assert check_range(date(1990, 3, 10), date(1997, 3, 10)) is None


def test_reversed_range_echoes_both_bounds() -> None:
    failure = check_range(date(1997, 3, 10), date(1990, 3, 10))

    assert isinstance(failure, IllegalRange)
    (problem,) = failure.problems()
    assert problem.message == "Date `to`-'1990-03-10' is before date `from`-'1997-03-10'."
    assert problem.field is None
    assert problem.wrong_value is None


def test_equal_bounds_are_illegal() -> None:
    assert isinstance(check_range(date(2000, 1, 1), date(2000, 1, 1)), IllegalRange)
