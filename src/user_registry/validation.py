"""Per-field constraints for user requests.

Constraints are plain data: a tuple of ``FieldRule(field, predicate, message)``
keyed by wire field name. ``validate_create`` / ``validate_update`` walk the
whole tuple and collect every violation, so a request with three bad fields
gets three problems back in one response.

Only present (non-null) values are checked against their predicate. On create,
a missing required field yields a ``must not be null`` problem instead.
"""

import re
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any, NamedTuple

from email_validator import EmailNotValidError, validate_email

from user_registry.failures import Problem, ValidationFailure
from user_registry.schemas.user import UserCreateRequest, UserUpdateRequest

PHONE_PATTERN = re.compile(r"\+[0-9]{3}\s?[0-9]{2}\s?[0-9]{3}\s?[0-9]{4}", re.ASCII)
NAME_MIN_LENGTH = 2
ADDRESS_MAX_LENGTH = 500
NOT_NULL_MESSAGE = "must not be null"


class FieldRule(NamedTuple):
    field: str
    predicate: Callable[[Any, date], bool]
    message: str


def _min_length(value: str, _today: date) -> bool:
    return len(value) >= NAME_MIN_LENGTH


def _is_email(value: str, _today: date) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _in_past(value: date, today: date) -> bool:
    return value < today


def _short_address(value: str, _today: date) -> bool:
    return len(value) <= ADDRESS_MAX_LENGTH


def _is_phone(value: str, _today: date) -> bool:
    return value == "" or PHONE_PATTERN.fullmatch(value) is not None


CREATE_RULES: tuple[FieldRule, ...] = (
    FieldRule("firstName", _min_length, "The first name must be more than 2 letters."),
    FieldRule("lastName", _min_length, "The last name must be more than 2 letters."),
    FieldRule("email", _is_email, "Wrong email format."),
    FieldRule("birthDate", _in_past, "The date must be in the past."),
    FieldRule("address", _short_address, "The address is too long."),
    FieldRule(
        "phoneNumber",
        _is_phone,
        "Invalid phone number. Valid format is +380 93 123 4567 or without spaces +380931234567",
    ),
)

# Birth date is checked against "past" only when the person is created.
UPDATE_RULES: tuple[FieldRule, ...] = tuple(
    rule for rule in CREATE_RULES if rule.field != "birthDate"
)

REQUIRED_ON_CREATE: frozenset[str] = frozenset({"firstName", "lastName", "email", "birthDate"})


def _as_text(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def check_fields(
    values: Mapping[str, Any],
    rules: Iterable[FieldRule],
    today: date,
    required: frozenset[str] = frozenset(),
) -> list[Problem]:
    """Evaluate ``rules`` against ``values`` and return one problem per violation."""
    problems: list[Problem] = []
    for rule in rules:
        value = values.get(rule.field)
        if value is None:
            if rule.field in required:
                problems.append(Problem(message=NOT_NULL_MESSAGE, field=rule.field))
            continue
        if not rule.predicate(value, today):
            problems.append(
                Problem(message=rule.message, field=rule.field, wrong_value=_as_text(value))
            )
    return problems


def validate_create(request: UserCreateRequest, today: date) -> ValidationFailure | None:
    problems = check_fields(
        request.model_dump(by_alias=True), CREATE_RULES, today, required=REQUIRED_ON_CREATE
    )
    return ValidationFailure(tuple(problems)) if problems else None


def validate_update(request: UserUpdateRequest, today: date) -> ValidationFailure | None:
    problems = check_fields(request.model_dump(by_alias=True), UPDATE_RULES, today)
    return ValidationFailure(tuple(problems)) if problems else None
