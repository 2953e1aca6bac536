"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main. Tests override ``get_db``, ``get_today`` and
``get_age_policy`` through ``app.dependency_overrides``.
"""

from datetime import date
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.config import settings
from user_registry.db.session import get_db
from user_registry.rules import AgePolicy
from user_registry.schemas.pagination import PageRequest, parse_sort

MAX_PAGE_SIZE = 2000


def get_today() -> date:
    return date.today()


def get_age_policy() -> AgePolicy:
    return AgePolicy.from_settings(settings)


def get_page_request(
    page: Annotated[int, Query(ge=0, description="Zero-based page index")] = 0,
    size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Page size")] = 20,
    sort: Annotated[
        list[str] | None,
        Query(description="Sort keys as property[,asc|desc], may be repeated"),
    ] = None,
) -> PageRequest:
    return PageRequest(page=page, size=size, sort=parse_sort(sort or []))


DB = Annotated[AsyncSession, Depends(get_db)]
Today = Annotated[date, Depends(get_today)]
Policy = Annotated[AgePolicy, Depends(get_age_policy)]
Pagination = Annotated[PageRequest, Depends(get_page_request)]
