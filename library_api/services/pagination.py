"""
Pagination Calculator

Every listing in the API is shaped here: how big a page is, how many
pages there are, where a page starts, and the Paging metadata sent back.

Rules:
- A missing or non-positive page size falls back to the configured
  default (Settings.default_page_size).
- page_count = ceil(total / page_max_size), and 0 when there is nothing.
- A page past the end, or a page number below 1, is an empty page,
  never an error.
- Paging.page_size is the number of items actually returned, which is
  smaller than page_max_size on the last page and 0 past the end.

Usage:
    page = PageRequest.create(page_number=2, page_size=10)
    stmt = page.apply(select(Book).order_by(Book.id))
    books = db.execute(stmt).scalars().all()
    return page.envelope(books, total)
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy import Select

from library_api.config import get_settings
from library_api.schemas.paging import Envelope, Paging

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """
    A requested page: 1-indexed page number and effective page size.

    Build it with PageRequest.create() so the default page size is
    applied; the constructor takes the values as given.
    """

    page_number: int
    page_max_size: int

    @classmethod
    def create(
        cls,
        page_number: int = 1,
        page_size: int | None = None,
        default_page_size: int | None = None,
    ) -> "PageRequest":
        """
        Resolve a page request.

        Args:
            page_number: 1-indexed page
            page_size: Requested items per page; None or <= 0 means default
            default_page_size: Override for the configured default

        Returns:
            PageRequest with a positive page_max_size
        """
        if default_page_size is None:
            default_page_size = get_settings().default_page_size
        if page_size is None or page_size <= 0:
            page_size = default_page_size
        return cls(page_number=page_number, page_max_size=page_size)

    @property
    def offset(self) -> int:
        """Index of the first item on this page."""
        return (self.page_number - 1) * self.page_max_size

    @property
    def in_range(self) -> bool:
        return self.page_number >= 1

    def page_count(self, total: int) -> int:
        if total <= 0:
            return 0
        return math.ceil(total / self.page_max_size)

    def slice(self, items: Sequence[T]) -> list[T]:
        """Cut this page out of an in-memory sequence."""
        if not self.in_range:
            return []
        return list(items[self.offset:self.offset + self.page_max_size])

    def apply(self, stmt: Select) -> Select:
        """
        Add OFFSET/LIMIT for this page to a select.

        The statement must already be ordered, otherwise page contents
        are not stable between requests.
        """
        if not self.in_range:
            return stmt.limit(0)
        return stmt.offset(self.offset).limit(self.page_max_size)

    def paging(self, total: int, returned: int) -> Paging:
        return Paging(
            page_count=self.page_count(total),
            page_size=returned,
            page_max_size=self.page_max_size,
            page_number=self.page_number,
            total_number_of_items=total,
        )

    def envelope(self, items: Sequence[T], total: int) -> Envelope[T]:
        """Wrap one page of items with its Paging."""
        page_items = list(items)
        return Envelope(items=page_items, paging=self.paging(total, len(page_items)))


def paginate(
    items: Sequence[T],
    page_number: int = 1,
    page_size: int | None = None,
) -> Envelope[T]:
    """
    Paginate an in-memory sequence.

    Args:
        items: Every item, already in display order
        page_number: 1-indexed page
        page_size: Items per page (None or <= 0 for the default)

    Returns:
        Envelope with the requested page and its Paging
    """
    page = PageRequest.create(page_number, page_size)
    return page.envelope(page.slice(items), len(items))
