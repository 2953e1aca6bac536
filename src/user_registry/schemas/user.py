"""User request and response schemas.

Field names are snake_case in Python and camelCase on the wire
(``first_name`` <-> ``firstName``). Request fields are all optional at the
Pydantic level: Pydantic only checks JSON types, while presence and content
rules live in ``user_registry.validation`` so every violation is reported at
once, with our own messages.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserCreateRequest(CamelModel):
    """Body of POST /users. firstName, lastName, email and birthDate are required."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    birth_date: date | None = None
    address: str | None = None
    phone_number: str | None = None


class UserUpdateRequest(CamelModel):
    """Body of PUT /users/{id}. Any subset of fields; null means "keep"."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    birth_date: date | None = None
    address: str | None = None
    phone_number: str | None = None


class UserResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    birth_date: date
    address: str | None = None
    phone_number: str | None = None
