"""Cursor-based pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, Sequence, TypeVar

from ..utils.logging import get_logger
from .errors import PaginationOverrun

T = TypeVar("T")

LOGGER = get_logger(__name__)


@dataclass
class Page(Generic[T]):
    items: Sequence[T] = field(default_factory=list)
    next_cursor: str | None = None


def iter_pages(
    fetch_page: Callable[[str | None], Page[T]],
    *,
    max_pages: int | None = None,
) -> Iterator[Page[T]]:
    """Yield pages until a response carries no continuation cursor.

    ``max_pages`` bounds the walk; ``None`` or ``0`` trusts the server to
    eventually omit the cursor.
    """
    cursor: str | None = None
    fetched = 0
    while True:
        if max_pages and fetched >= max_pages:
            raise PaginationOverrun(
                "Listing did not terminate within the page limit",
                details={"max_pages": max_pages, "cursor": cursor},
            )
        page = fetch_page(cursor)
        fetched += 1
        LOGGER.debug(
            "Fetched page",
            extra={"event": "pagination.page", "page": fetched, "items": len(page.items)},
        )
        yield page
        if not page.next_cursor:
            return
        cursor = page.next_cursor


def collect_pages(
    fetch_page: Callable[[str | None], Page[T]],
    *,
    max_pages: int | None = None,
) -> list[T]:
    """Concatenate the items of every page in page order."""
    items: list[T] = []
    for page in iter_pages(fetch_page, max_pages=max_pages):
        items.extend(page.items)
    return items


__all__ = ["Page", "collect_pages", "iter_pages"]
