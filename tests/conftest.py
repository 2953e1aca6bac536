import os
from collections.abc import AsyncIterator
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

import user_registry.models  # noqa: F401  registers Person with Base.metadata
from user_registry.db.session import Base, get_db
from user_registry.dependencies import get_age_policy, get_today
from user_registry.main import app
from user_registry.rules import AgePolicy

# Pytest only picks up fixtures from conftest.py files; seeds live in their own module.
pytest_plugins = ["tests.seeds"]

# In-memory SQLite by default; point TEST_DATABASE_URL at Postgres to run the
# same suite against the production dialect.
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Fixed clock so age and "in the past" checks do not drift with the calendar.
TODAY = date(2024, 6, 15)
MIN_AGE = 18


def _make_engine() -> AsyncEngine:
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection, otherwise every checkout sees a fresh empty database
        return create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    return create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create tables, yield the engine, then drop tables after the test."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the test session, a fixed date and an 18+ age policy."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_age_policy] = lambda: AgePolicy(min_age=MIN_AGE)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
