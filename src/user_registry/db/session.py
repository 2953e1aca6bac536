from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from user_registry.config import settings

# Naming conventions for database constraints.
# Alembic relies on these to produce stable constraint names across migrations;
# the unique email constraint ends up as "uq_users_email".
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    SQLAlchemy uses Base.metadata to track all registered models and their
    table schemas; Alembic autogenerate reads the same metadata.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _connect_args(database_url: str) -> dict[str, Any]:
    # command_timeout is an asyncpg option; other drivers reject unknown kwargs
    if "+asyncpg" in database_url:
        return {"command_timeout": settings.db_statement_timeout}
    return {}


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
    pool_recycle=settings.db_pool_recycle,
    pool_pre_ping=settings.db_pool_pre_ping,
    echo=settings.db_echo,
    connect_args=_connect_args(settings.database_url),
)

# expire_on_commit=False keeps objects usable after commit without re-querying,
# accessing expired attributes in async code would need implicit I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    The whole request runs in one transaction: commit on success, roll back on
    exception. Update and delete therefore read, modify and write the same
    row without another request interleaving a partial change. Services flush
    explicitly so integrity errors surface while they can still classify them.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled database connections (called from the app lifespan)."""
    await engine.dispose()
