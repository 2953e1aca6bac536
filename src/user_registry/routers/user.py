"""User endpoints.

Each handler calls one service function and either serializes the result or
hands the failure to the responder. Response bodies omit null fields.
"""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Path, Query, Request, Response

from user_registry import mapper
from user_registry.dependencies import DB, Pagination, Policy, Today
from user_registry.failures import Failure
from user_registry.responder import problem_response
from user_registry.schemas.error import ProblemDetail
from user_registry.schemas.pagination import Page, PageResponse
from user_registry.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from user_registry.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"])

# Ids are BIGINT in the store.
MAX_USER_ID = 2**63 - 1

UserId = Annotated[int, Path(ge=1, le=MAX_USER_ID, description="User identifier")]

_PROBLEMS: dict[int | str, dict[str, Any]] = {
    400: {"model": ProblemDetail, "description": "Invalid input"},
}
_PROBLEMS_WITH_404: dict[int | str, dict[str, Any]] = {
    **_PROBLEMS,
    404: {"model": ProblemDetail, "description": "User not found"},
}


def _page_response(page: Page[Any]) -> PageResponse[UserResponse]:
    items = [mapper.to_response(person) for person in page.items]
    converted = Page(items=items, total=page.total, request=page.request)
    return PageResponse[UserResponse].from_page(converted)


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    response_model_exclude_none=True,
    responses=_PROBLEMS,
)
async def create_user(
    request: Request, body: UserCreateRequest, db: DB, policy: Policy, today: Today
) -> UserResponse | Response:
    """Create a user. The person must be at least the configured minimum age."""
    result = await user_service.create_user(db, body, policy=policy, today=today)
    if isinstance(result, Failure):
        return problem_response(result, request.url.path)
    return mapper.to_response(result)


@router.get(
    "",
    response_model=PageResponse[UserResponse],
    response_model_exclude_none=True,
    responses=_PROBLEMS,
)
async def list_users(
    request: Request, db: DB, page: Pagination
) -> PageResponse[UserResponse] | Response:
    """List users page by page."""
    result = await user_service.get_users(db, page)
    if isinstance(result, Failure):
        return problem_response(result, request.url.path)
    return _page_response(result)


@router.get(
    "/birthdays",
    response_model=PageResponse[UserResponse],
    response_model_exclude_none=True,
    responses=_PROBLEMS,
)
async def search_users_by_birth_date(
    request: Request,
    db: DB,
    page: Pagination,
    date_from: Annotated[date, Query(alias="from", examples=["1997-03-10"])],
    date_to: Annotated[date, Query(alias="to", examples=["2000-01-26"])],
) -> PageResponse[UserResponse] | Response:
    """Find users whose birth date lies in [from, to]; ``from`` must be before ``to``."""
    result = await user_service.search_users_by_birth_date(db, date_from, date_to, page)
    if isinstance(result, Failure):
        return problem_response(result, request.url.path)
    return _page_response(result)


@router.put(
    "/{id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    responses=_PROBLEMS_WITH_404,
)
async def update_user(
    request: Request, id: UserId, body: UserUpdateRequest, db: DB, today: Today  # noqa: A002
) -> UserResponse | Response:
    """Update some or all fields of a user; omitted or null fields keep their value."""
    result = await user_service.update_user(db, id, body, today=today)
    if isinstance(result, Failure):
        return problem_response(result, request.url.path)
    return mapper.to_response(result)


@router.delete("/{id}", status_code=200, responses=_PROBLEMS_WITH_404)
async def delete_user(request: Request, id: UserId, db: DB) -> Response:  # noqa: A002
    """Delete a user by id."""
    result = await user_service.delete_user(db, id)
    if isinstance(result, Failure):
        return problem_response(result, request.url.path)
    return Response(status_code=200)
