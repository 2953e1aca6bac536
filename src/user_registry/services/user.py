"""User business logic.

Runs each request through validation, business rules and the store, in that
order, and returns either the result or a failure value from
``user_registry.failures``. Nothing here raises for caller mistakes; the
router passes failures to the responder.
"""

from datetime import date

from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry import mapper
from user_registry.failures import (
    Failure,
    NotFound,
    Result,
    UniquenessConflict,
    UnknownSortProperty,
)
from user_registry.logging import get_logger
from user_registry.models import Person
from user_registry.repositories.person import (
    add_person,
    count_people,
    count_people_born_between,
    delete_person,
    get_person,
    list_people,
    list_people_born_between,
    person_exists,
    save_person,
    unknown_sort_properties,
)
from user_registry.rules import AgePolicy, check_range
from user_registry.schemas.pagination import Page, PageRequest
from user_registry.schemas.user import UserCreateRequest, UserUpdateRequest
from user_registry.validation import validate_create, validate_update

logger = get_logger(__name__)


async def _conflict(db: AsyncSession, exc: IntegrityError | DataError) -> UniquenessConflict:
    # The failed flush leaves the transaction unusable; reset it so the
    # request dependency can still finish cleanly.
    await db.rollback()
    return UniquenessConflict.from_error(exc)


def _check_sort(page: PageRequest) -> Failure | None:
    unknown = unknown_sort_properties(page)
    return UnknownSortProperty(name=unknown[0]) if unknown else None


async def create_user(
    db: AsyncSession, request: UserCreateRequest, *, policy: AgePolicy, today: date
) -> Result[Person]:
    """Validate, check age, then insert a new person."""
    if failure := validate_create(request, today):
        return failure
    # birth_date is present once validate_create has passed
    if failure := policy.check(request.birth_date, today):  # type: ignore[arg-type]
        return failure

    try:
        person = await add_person(db, mapper.to_person(request))
    except (IntegrityError, DataError) as exc:
        return await _conflict(db, exc)

    logger.info("user_created", user_id=person.id)
    return person


async def get_users(db: AsyncSession, page: PageRequest) -> Result[Page[Person]]:
    """One page of all users, ordered as requested."""
    if failure := _check_sort(page):
        return failure
    items, total = await list_people(db, page), await count_people(db)
    return Page(items=items, total=total, request=page)


async def update_user(
    db: AsyncSession, user_id: int, request: UserUpdateRequest, *, today: date
) -> Result[Person]:
    """Apply the non-null fields of ``request`` to an existing user.

    Birth date is deliberately not re-checked against "past" here.
    """
    if failure := validate_update(request, today):
        return failure

    person = await get_person(db, user_id)
    if person is None:
        return NotFound(user_id=user_id)

    mapper.merge_update(person, request)
    try:
        await save_person(db, person)
    except (IntegrityError, DataError) as exc:
        return await _conflict(db, exc)

    logger.info("user_updated", user_id=user_id)
    return person


async def delete_user(db: AsyncSession, user_id: int) -> Result[None]:
    if not await person_exists(db, user_id):
        return NotFound(user_id=user_id)
    await delete_person(db, user_id)
    logger.info("user_deleted", user_id=user_id)
    return None


async def search_users_by_birth_date(
    db: AsyncSession, date_from: date, date_to: date, page: PageRequest
) -> Result[Page[Person]]:
    """Users born between ``date_from`` and ``date_to`` inclusive."""
    if failure := check_range(date_from, date_to):
        return failure
    if failure := _check_sort(page):
        return failure
    items = await list_people_born_between(db, date_from, date_to, page)
    total = await count_people_born_between(db, date_from, date_to)
    return Page(items=items, total=total, request=page)
