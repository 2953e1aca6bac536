"""Problem response schemas.

Every error response uses the same RFC 7807 style envelope::

    {
        "type": "about:blank",
        "title": "Bad Request",
        "status": 400,
        "detail": "Failed validation",
        "instance": "/api/v1/users",
        "problemDetails": [{"message": "...", "field": "...", "wrongValue": "..."}]
    }

``responder.problem_response`` builds these from failure values; null
``field`` / ``wrongValue`` are dropped on serialization.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProblemItem(BaseModel):
    """A single cause: message plus the offending field and value when known."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    field: str | None = None
    wrong_value: str | None = None


class ProblemDetail(BaseModel):
    """Top-level problem envelope returned by all error responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    instance: str
    problem_details: list[ProblemItem]
