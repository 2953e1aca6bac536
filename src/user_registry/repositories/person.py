"""Person data-access layer.

Pure query functions with no business logic.
Each function takes a session and returns models or scalars. Writes are
flushed immediately so constraint violations raise here, inside the caller's
transaction, rather than at commit time.
"""

from datetime import date

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.models import Person
from user_registry.schemas.pagination import Direction, PageRequest

# Wire names accepted in ``sort`` mapped to columns.
SORTABLE_COLUMNS = {
    "id": Person.id,
    "firstName": Person.first_name,
    "lastName": Person.last_name,
    "email": Person.email,
    "birthDate": Person.birth_date,
    "address": Person.address,
    "phoneNumber": Person.phone_number,
}


def unknown_sort_properties(page: PageRequest) -> list[str]:
    return [order.property for order in page.sort if order.property not in SORTABLE_COLUMNS]


def _order_by(page: PageRequest) -> list[ColumnElement[object]]:
    clauses: list[ColumnElement[object]] = []
    for order in page.sort:
        column = SORTABLE_COLUMNS[order.property]
        clauses.append(column.desc() if order.direction is Direction.DESC else column.asc())
    # id last so rows with equal sort keys keep a stable order across pages
    clauses.append(Person.id.asc())
    return clauses


def _paged(stmt: Select[tuple[Person]], page: PageRequest) -> Select[tuple[Person]]:
    return stmt.order_by(*_order_by(page)).offset(page.offset).limit(page.size)


async def add_person(db: AsyncSession, person: Person) -> Person:
    """Insert ``person`` and return it with its generated id."""
    db.add(person)
    await db.flush()
    return person


async def save_person(db: AsyncSession, person: Person) -> Person:
    """Flush pending changes of an already persistent ``person``."""
    await db.flush()
    return person


async def get_person(db: AsyncSession, person_id: int) -> Person | None:
    return await db.get(Person, person_id)


async def person_exists(db: AsyncSession, person_id: int) -> bool:
    stmt = select(Person.id).where(Person.id == person_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def delete_person(db: AsyncSession, person_id: int) -> None:
    person = await db.get(Person, person_id)
    if person is not None:
        await db.delete(person)
        await db.flush()


async def list_people(db: AsyncSession, page: PageRequest) -> list[Person]:
    result = await db.execute(_paged(select(Person), page))
    return list(result.scalars().all())


async def count_people(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Person.id)))
    return result.scalar_one()


async def list_people_born_between(
    db: AsyncSession, date_from: date, date_to: date, page: PageRequest
) -> list[Person]:
    """Page of people with ``date_from <= birth_date <= date_to``."""
    stmt = select(Person).where(Person.birth_date.between(date_from, date_to))
    result = await db.execute(_paged(stmt, page))
    return list(result.scalars().all())


async def count_people_born_between(db: AsyncSession, date_from: date, date_to: date) -> int:
    stmt = select(func.count(Person.id)).where(Person.birth_date.between(date_from, date_to))
    result = await db.execute(stmt)
    return result.scalar_one()
