"""Failure kinds returned by services instead of raised.

Every operation in ``services.user`` returns ``Result[T]``: either the value or
one of the frozen dataclasses below. The router hands failures to
``responder.problem_response``, which owns the single mapping from kind to
HTTP status and category label.

Each kind knows how to describe itself as a list of ``Problem`` entries, the
``problemDetails`` part of the response body.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import TypeAlias, TypeVar


@dataclass(frozen=True)
class Problem:
    """One cause of a failure: what went wrong, on which field, with which value."""

    message: str
    field: str | None = None
    wrong_value: str | None = None


class Failure(ABC):
    """Base class for all failure kinds."""

    @abstractmethod
    def problems(self) -> list[Problem]: ...


@dataclass(frozen=True)
class ValidationFailure(Failure):
    """One or more structural field constraints were violated."""

    violations: tuple[Problem, ...]

    def problems(self) -> list[Problem]:
        return list(self.violations)


@dataclass(frozen=True)
class AgeIneligible(Failure):
    birth_date: date

    def problems(self) -> list[Problem]:
        value = self.birth_date.isoformat()
        return [
            Problem(
                message=f"You are too young to register. Your birthday is at '{value}'",
                field="birthDate",
                wrong_value=value,
            )
        ]


@dataclass(frozen=True)
class NotFound(Failure):
    user_id: int

    def problems(self) -> list[Problem]:
        return [
            Problem(
                message=f"User with id='{self.user_id}' can not be found",
                field="User id",
                wrong_value=str(self.user_id),
            )
        ]


@dataclass(frozen=True)
class IllegalRange(Failure):
    """Range search bounds are not in strictly ascending order."""

    date_from: date
    date_to: date

    def problems(self) -> list[Problem]:
        return [
            Problem(
                message=(
                    f"Date `to`-'{self.date_to.isoformat()}' is before "
                    f"date `from`-'{self.date_from.isoformat()}'."
                )
            )
        ]


@dataclass(frozen=True)
class UniquenessConflict(Failure):
    """The store rejected a write; ``message`` is the root cause reported by the driver."""

    message: str

    @classmethod
    def from_error(cls, exc: BaseException) -> "UniquenessConflict":
        while exc.__cause__ is not None:
            exc = exc.__cause__
        return cls(message=str(exc))

    def problems(self) -> list[Problem]:
        return [Problem(message=self.message)]


@dataclass(frozen=True)
class ParameterConstraintViolation(Failure):
    """A path or query parameter parsed fine but is out of its allowed range."""

    name: str
    message: str
    value: str | None = None

    def problems(self) -> list[Problem]:
        return [Problem(message=self.message, field=self.name, wrong_value=self.value)]


@dataclass(frozen=True)
class ParameterTypeMismatch(Failure):
    name: str
    expected_type: str
    value: str = ""

    def problems(self) -> list[Problem]:
        return [
            Problem(
                message=f"The field '{self.name}' must have a valid type of '{self.expected_type}'",
                field=self.name,
                wrong_value=self.value,
            )
        ]


@dataclass(frozen=True)
class MissingParameter(Failure):
    name: str

    def problems(self) -> list[Problem]:
        message = f"Required parameter '{self.name}' is not present"
        return [Problem(message=message, field=self.name)]


@dataclass(frozen=True)
class UnknownSortProperty(Failure):
    name: str

    def problems(self) -> list[Problem]:
        return [
            Problem(
                message=f"No property '{self.name}' found for type 'User'",
                field="sort",
                wrong_value=self.name,
            )
        ]


T = TypeVar("T")

Result: TypeAlias = T | Failure
