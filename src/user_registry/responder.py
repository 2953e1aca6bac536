"""Turns failure values into problem responses.

``CATEGORIES`` is the one place that decides which status code and
category label a failure kind gets. Every error path (service results,
request validation, integrity errors escaping a service) ends up here.
"""

from collections.abc import Mapping, Sequence
from http import HTTPStatus
from typing import Any

from fastapi.responses import JSONResponse

from user_registry.failures import (
    AgeIneligible,
    Failure,
    IllegalRange,
    MissingParameter,
    NotFound,
    ParameterConstraintViolation,
    ParameterTypeMismatch,
    Problem,
    UniquenessConflict,
    UnknownSortProperty,
    ValidationFailure,
)
from user_registry.logging import get_logger
from user_registry.schemas.error import ProblemDetail, ProblemItem

logger = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

CATEGORIES: dict[type[Failure], tuple[HTTPStatus, str]] = {
    ValidationFailure: (HTTPStatus.BAD_REQUEST, "Failed validation"),
    AgeIneligible: (HTTPStatus.BAD_REQUEST, "Young Age"),
    NotFound: (HTTPStatus.NOT_FOUND, "User is not found"),
    IllegalRange: (HTTPStatus.BAD_REQUEST, "Illegal arguments"),
    UniquenessConflict: (HTTPStatus.BAD_REQUEST, "Constraint violation"),
    ParameterConstraintViolation: (HTTPStatus.BAD_REQUEST, "Constraint violation"),
    ParameterTypeMismatch: (HTTPStatus.BAD_REQUEST, "Wrong input parameter"),
    MissingParameter: (HTTPStatus.BAD_REQUEST, "Wrong input parameter"),
    UnknownSortProperty: (HTTPStatus.BAD_REQUEST, "Wrong input parameter"),
}


def build_problem(
    status: HTTPStatus, detail: str, instance: str, problems: list[ProblemItem]
) -> ProblemDetail:
    return ProblemDetail(
        title=status.phrase,
        status=status.value,
        detail=detail,
        instance=instance,
        problem_details=problems,
    )


def problem_json(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(mode="json", by_alias=True, exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def to_problem(failure: Failure, instance: str) -> ProblemDetail:
    status, label = CATEGORIES[type(failure)]
    items = [
        ProblemItem(message=p.message, field=p.field, wrong_value=p.wrong_value)
        for p in failure.problems()
    ]
    return build_problem(status, label, instance, items)


def problem_response(failure: Failure, instance: str) -> JSONResponse:
    """Render ``failure`` as an ``application/problem+json`` response."""
    problem = to_problem(failure, instance)
    logger.warning(
        "request_failed",
        detail=problem.detail,
        status=problem.status,
        problems=len(problem.problem_details),
    )
    return problem_json(problem)


# Pydantic error types for numeric bounds, with the wording used in problems.
_BOUND_PHRASES: dict[str, tuple[str, str]] = {
    "greater_than": ("gt", "must be greater than"),
    "greater_than_equal": ("ge", "must be greater than or equal to"),
    "less_than": ("lt", "must be less than"),
    "less_than_equal": ("le", "must be less than or equal to"),
}


def _raw_text(value: Any) -> str | None:
    if value is None or isinstance(value, dict | list):
        return None
    return str(value)


def _parameter_failure(error: Mapping[str, Any], name: str) -> Failure:
    kind = error["type"]
    value = _raw_text(error.get("input"))
    if kind == "missing":
        return MissingParameter(name=name)
    if kind in _BOUND_PHRASES:
        key, phrase = _BOUND_PHRASES[kind]
        limit = error.get("ctx", {}).get(key)
        return ParameterConstraintViolation(name=name, message=f"{phrase} {limit}", value=value)
    # int_parsing -> int, date_from_datetime_parsing -> date, ...
    return ParameterTypeMismatch(name=name, expected_type=kind.split("_")[0], value=value or "")


def failure_from_request_errors(errors: Sequence[Mapping[str, Any]]) -> Failure:
    """Classify FastAPI request validation errors.

    Path and query errors come first in FastAPI's error list; the first of
    them decides the failure on its own. Body errors are all kept and
    reported together as a ``ValidationFailure``.

    A body that fails to parse never reaches the field rules in
    ``user_registry.validation``. ``{"firstName": "A", "birthDate": "nope"}``
    reports only ``birthDate``; the short first name shows up once the date
    is fixed.
    """
    body_problems: list[Problem] = []
    for error in errors:
        location, *path = error["loc"]
        name = path[0] if path and isinstance(path[0], str) else None
        if location == "body":
            body_problems.append(
                Problem(message=error["msg"], field=name, wrong_value=_raw_text(error.get("input")))
            )
        else:
            return _parameter_failure(error, name or str(location))
    return ValidationFailure(tuple(body_problems))
