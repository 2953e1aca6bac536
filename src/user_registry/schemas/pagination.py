"""Generic pagination types shared by all list endpoints.

PageRequest, SortOrder: what the caller asked for, passed down unchanged to
    the repository, which does the ORDER BY / OFFSET.
Page[T]: plain dataclass for service-layer returns.
PageResponse[T]: Pydantic model for HTTP responses.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Direction(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    property: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and ordered sort keys."""

    page: int = 0
    size: int = 20
    sort: tuple[SortOrder, ...] = ()

    @property
    def offset(self) -> int:
        return self.page * self.size


def parse_sort(values: list[str]) -> tuple[SortOrder, ...]:
    """Parse ``sort`` query values of the form ``prop[,prop...][,asc|desc]``.

    The trailing token is taken as the direction when it is ``asc`` or
    ``desc`` (any case); all properties in one value share that direction::

        parse_sort(["lastName,firstName,desc", "id"])
        # lastName DESC, firstName DESC, id ASC
    """
    orders: list[SortOrder] = []
    for value in values:
        tokens = [token.strip() for token in value.split(",") if token.strip()]
        direction = Direction.ASC
        if tokens and tokens[-1].lower() in (Direction.ASC, Direction.DESC):
            direction = Direction(tokens.pop().lower())
        orders.extend(SortOrder(prop, direction) for prop in tokens)
    return tuple(orders)


@dataclass
class Page(Generic[T]):
    """A slice of results plus the request that produced it.

    Services return this; routers convert it with ``PageResponse.from_page``.
    """

    items: list[T]
    total: int
    request: PageRequest = field(default_factory=PageRequest)

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.request.size) if self.request.size else 0


class SortOrderResponse(BaseModel):
    property: str
    direction: Direction


class PageResponse(BaseModel, Generic[T]):
    """Pydantic model for paginated HTTP responses.

    Parameterize per entity, e.g. ``PageResponse[UserResponse]``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[T]
    page: int
    size: int
    sort: list[SortOrderResponse]
    total_elements: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[T]) -> "PageResponse[T]":
        request = page.request
        return cls(
            content=page.items,
            page=request.page,
            size=request.size,
            sort=[
                SortOrderResponse(property=o.property, direction=o.direction)
                for o in request.sort
            ],
            total_elements=page.total,
            total_pages=page.total_pages,
        )
