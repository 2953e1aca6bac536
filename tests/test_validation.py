"""Unit tests for the per-field validation pipeline."""

from datetime import date, timedelta

import pytest

from tests.factories import create_request
from user_registry.failures import Problem
from user_registry.schemas.user import UserCreateRequest, UserUpdateRequest
from user_registry.validation import (
    CREATE_RULES,
    NOT_NULL_MESSAGE,
    UPDATE_RULES,
    validate_create,
    validate_update,
)

TODAY = date(2024, 6, 15)


def test_valid_create_request_passes() -> None:
    assert validate_create(create_request(), TODAY) is None


def test_short_first_name_yields_exactly_one_problem() -> None:
    failure = validate_create(create_request(firstName="A"), TODAY)

    assert failure is not None
    assert failure.problems() == [
        Problem(
            message="The first name must be more than 2 letters.",
            field="firstName",
            wrong_value="A",
        )
    ]


def test_missing_required_fields_are_reported_without_wrong_value() -> None:
    request = UserCreateRequest(first_name="Oleksii", last_name="Ivanchenko")

    failure = validate_create(request, TODAY)

    assert failure is not None
    problems = failure.problems()
    assert {p.field for p in problems} == {"email", "birthDate"}
    assert all(p.message == NOT_NULL_MESSAGE for p in problems)
    assert all(p.wrong_value is None for p in problems)


def test_empty_create_request_lists_every_required_field() -> None:
    failure = validate_create(UserCreateRequest(), TODAY)

    assert failure is not None
    assert sorted(p.field for p in failure.problems()) == [
        "birthDate",
        "email",
        "firstName",
        "lastName",
    ]


def test_all_violations_are_collected() -> None:
    request = create_request(firstName="A", lastName="B", email="wrong.email#gmail.com")

    failure = validate_create(request, TODAY)

    assert failure is not None
    assert [p.field for p in failure.problems()] == ["firstName", "lastName", "email"]


@pytest.mark.parametrize(
    "email",
    ["wrong.email#gmail.com", "no-at-sign", "two@@gmail.com", "trailing@"],
)
def test_malformed_email_is_rejected(email: str) -> None:
    failure = validate_create(create_request(email=email), TODAY)

    assert failure is not None
    assert failure.problems() == [
        Problem(message="Wrong email format.", field="email", wrong_value=email)
    ]


def test_birth_date_in_future_is_rejected_with_iso_value() -> None:
    future = TODAY + timedelta(days=5)

    failure = validate_create(create_request(birthDate=future.isoformat()), TODAY)

    assert failure is not None
    assert failure.problems() == [
        Problem(
            message="The date must be in the past.", field="birthDate", wrong_value="2024-06-20"
        )
    ]


def test_birth_date_today_is_not_in_the_past() -> None:
    failure = validate_create(create_request(birthDate=TODAY.isoformat()), TODAY)

    assert failure is not None
    assert failure.problems()[0].field == "birthDate"


def test_address_length_limit() -> None:
    assert validate_create(create_request(address="x" * 500), TODAY) is None

    failure = validate_create(create_request(address="x" * 501), TODAY)

    assert failure is not None
    assert failure.problems()[0].field == "address"
    assert failure.problems()[0].message == "The address is too long."


@pytest.mark.parametrize("phone", ["+380 93 123 4567", "+380931234567", "+380 931234567", ""])
def test_accepted_phone_numbers(phone: str) -> None:
    assert validate_create(create_request(phoneNumber=phone), TODAY) is None


@pytest.mark.parametrize(
    "phone",
    [
        "0931234567",
        "+38 093 123 4567",
        "+380 93 123 456",
        "+380-93-123-4567",
        "+380  93 123 4567",
        "+380931234567\n",
        "+380\u00a093 123 4567",
    ],
    ids=["no_plus", "short_code", "short_number", "dashes", "double_space", "newline", "nbsp"],
)
def test_rejected_phone_numbers(phone: str) -> None:
    failure = validate_create(create_request(phoneNumber=phone), TODAY)

    assert failure is not None
    (problem,) = failure.problems()
    assert problem.field == "phoneNumber"
    assert problem.wrong_value == phone


def test_optional_fields_may_be_absent_on_create() -> None:
    request = create_request(address=None, phoneNumber=None)

    assert validate_create(request, TODAY) is None


def test_empty_update_request_passes() -> None:
    assert validate_update(UserUpdateRequest(), TODAY) is None


def test_update_checks_present_fields() -> None:
    failure = validate_update(UserUpdateRequest(first_name="A", phone_number="123"), TODAY)

    assert failure is not None
    assert [p.field for p in failure.problems()] == ["firstName", "phoneNumber"]


def test_update_does_not_recheck_birth_date_against_today() -> None:
    request = UserUpdateRequest(birth_date=TODAY + timedelta(days=30))

    assert validate_update(request, TODAY) is None


def test_rule_table_is_inspectable() -> None:
    assert [rule.field for rule in CREATE_RULES] == [
        "firstName",
        "lastName",
        "email",
        "birthDate",
        "address",
        "phoneNumber",
    ]
    assert "birthDate" not in {rule.field for rule in UPDATE_RULES}
