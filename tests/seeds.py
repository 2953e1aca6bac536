"""Reusable seed data fixtures for integration tests."""

from datetime import date

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import make_person
from user_registry.models import Person


@pytest_asyncio.fixture
async def seeded_people(db: AsyncSession) -> list[Person]:
    """Four committed people, listed in insertion (id) order."""
    people = [
        make_person(
            first_name="Oleksii",
            last_name="Ivanyuk",
            email="o.ivanyuk@gmail.com",
            birth_date=date(1989, 6, 27),
            address="Kyiv, Ukraine",
            phone_number="+380 93 123 4567",
        ),
        make_person(
            first_name="Ivan",
            last_name="Piddubko",
            email="dub123@gmail.com",
            birth_date=date(1991, 2, 21),
            address="Poltava, Ukraine",
            phone_number="+380 93 123 6565",
        ),
        make_person(
            first_name="Oksana",
            last_name="Stefanchuk",
            email="oksana@gmail.com",
            birth_date=date(2000, 2, 1),
            address="Lviv, Ukraine",
            phone_number="+380 50 123 6565",
        ),
        make_person(
            first_name="Iryna",
            last_name="Stecko",
            email="stec@gmail.com",
            birth_date=date(2005, 11, 15),
            address=None,
            phone_number=None,
        ),
    ]
    db.add_all(people)
    await db.commit()
    return people
