"""Sort and paginate in-memory lists for the list endpoints."""

import math
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from app.schemas.envelope import Pagination

T = TypeVar("T")

SortKey = Callable[[Any], Any]


def sort_items(
    items: Sequence[T],
    key: SortKey,
    sort_order: str = "asc",
) -> list[T]:
    """Return a new list ordered by key; 'desc' reverses. Ties keep no guaranteed order."""
    return sorted(items, key=key, reverse=sort_order == "desc")


def paginate(items: Sequence[T], page: int, page_size: int) -> tuple[list[T], Pagination]:
    """
    Slice one page out of items and describe it.

    total_pages = ceil(total / page_size); pages past the end yield an empty slice.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total = len(items)
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size
    page_items = list(items[start : start + page_size])
    pagination = Pagination(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    return page_items, pagination
