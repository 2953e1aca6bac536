"""Conversions between request/response schemas and the Person model."""

from user_registry.models import Person
from user_registry.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

# Fields a client may set; id and timestamps are owned by the store.
MUTABLE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "birth_date",
    "address",
    "phone_number",
)


def to_person(request: UserCreateRequest) -> Person:
    return Person(**{name: getattr(request, name) for name in MUTABLE_FIELDS})


def merge_update(person: Person, request: UserUpdateRequest) -> Person:
    """Copy every non-null field of ``request`` onto ``person``; keep the rest."""
    for name in MUTABLE_FIELDS:
        value = getattr(request, name)
        if value is not None:
            setattr(person, name, value)
    return person


def to_response(person: Person) -> UserResponse:
    return UserResponse.model_validate(person)
