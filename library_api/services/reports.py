"""
Report Aggregator

Builds the per-user and per-book loan reports.

HOW A REPORT IS BUILT
=====================
1. Keep the loans that fall inside the LoanWindow (all loans when the
   window is empty).
2. Group them by user_id (user report) or book_id (book report).
3. Paginate the GROUPS, not the loans: total_number_of_items is the
   number of distinct users/books with at least one qualifying loan.
4. Each entry on the page carries every qualifying loan of its group.

Groups are ordered by id ascending; loans inside a group by loan_date,
then id. The database does steps 1-3 with three queries (count of
distinct keys, one page of keys, the rows for those keys), so the cost
of a page does not grow with the number of groups.

aggregate_loans() runs the same algorithm over loans already in memory.
"""

import logging
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from library_api.models.loan import Loan
from library_api.schemas.book import BookResponse
from library_api.schemas.loan import BookLoanResponse, UserLoanResponse
from library_api.schemas.paging import Envelope
from library_api.schemas.report import BookReportResponse, UserReportResponse
from library_api.schemas.user import UserResponse
from library_api.services.loan_window import LoanDates, LoanWindow
from library_api.services.pagination import PageRequest

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


# =============================================================================
# Grouping
# =============================================================================


@dataclass
class LoanGroup:
    """All qualifying loans of one user or one book."""

    key: Any
    loans: list[Any] = field(default_factory=list)


def _loan_order(loan: Any) -> tuple:
    return (loan.loan_date, getattr(loan, "id", 0) or 0)


def group_loans(
    loans: Iterable[R],
    key: Callable[[R], K],
) -> list[LoanGroup]:
    """
    Group loans by key, groups in ascending key order.

    Args:
        loans: Loans to group, any order
        key: Function returning the group key of a loan (e.g. its user_id)

    Returns:
        One LoanGroup per distinct key, loans sorted by loan_date then id
    """
    grouped: dict[K, list[R]] = {}
    for loan in loans:
        grouped.setdefault(key(loan), []).append(loan)
    return [
        LoanGroup(key=k, loans=sorted(grouped[k], key=_loan_order))
        for k in sorted(grouped)
    ]


def aggregate_loans(
    loans: Sequence[LoanDates],
    key: Callable[[Any], Hashable],
    page: PageRequest,
    window: LoanWindow | None = None,
    today: date | None = None,
) -> Envelope[LoanGroup]:
    """
    Filter, group and paginate loans held in memory.

    Args:
        loans: Every loan to consider
        key: Group key function (lambda loan: loan.user_id for a user report)
        page: Page of groups to return
        window: Loan filter; None or empty keeps every loan
        today: Reference day for a duration filter without a date

    Returns:
        Envelope of LoanGroup, total_number_of_items = number of groups
    """
    if window is not None and not window.is_empty:
        loans = [loan for loan in loans if window.matches(loan, today)]
    groups = group_loans(loans, key)
    return page.envelope(page.slice(groups), len(groups))


# =============================================================================
# Database Grouping
# =============================================================================


def paged_groups(
    db: Session,
    model: type,
    key_column: InstrumentedAttribute,
    page: PageRequest,
    conditions: Sequence[ColumnElement[bool]] = (),
    options: Sequence[LoaderOption] = (),
    order_by: Sequence[Any] = (),
) -> tuple[list[tuple[Any, list[Any]]], int]:
    """
    Paginate rows of `model` by distinct values of `key_column`.

    Args:
        db: Database session
        model: Mapped class to load (Loan, Review)
        key_column: Column whose distinct values are the page unit
        page: Page of keys to return
        conditions: Filters applied before grouping
        options: Loader options for the returned rows
        order_by: Row order inside a group

    Returns:
        ([(key, rows), ...] in ascending key order, number of distinct keys)
    """
    count_stmt = select(func.count(func.distinct(key_column)))
    keys_stmt = select(key_column).distinct().order_by(key_column)
    if conditions:
        count_stmt = count_stmt.where(*conditions)
        keys_stmt = keys_stmt.where(*conditions)

    total = db.execute(count_stmt).scalar() or 0
    keys = list(db.execute(page.apply(keys_stmt)).scalars().all())
    logger.debug(
        f"Grouping {model.__name__} by {key_column.key}: "
        f"{total} groups, page {page.page_number} has {len(keys)}"
    )
    if not keys:
        return [], total

    rows_stmt = (
        select(model)
        .where(key_column.in_(keys), *conditions)
        .options(*options)
        .order_by(key_column, *order_by)
    )
    rows = db.execute(rows_stmt).scalars().all()

    grouped: dict[Any, list[Any]] = {k: [] for k in keys}
    for row in rows:
        grouped[getattr(row, key_column.key)].append(row)
    return [(k, grouped[k]) for k in keys], total


# =============================================================================
# Reports
# =============================================================================


def build_user_report(
    db: Session,
    page: PageRequest,
    window: LoanWindow | None = None,
    today: date | None = None,
) -> Envelope[UserReportResponse]:
    """
    Users with the loans they hold inside the window, paginated by user.

    Args:
        db: Database session
        page: Page of users to return
        window: Loan filter (date the loan spans, minimum duration)
        today: Reference day for a duration filter without a date

    Returns:
        Envelope of UserReportResponse
    """
    window = window or LoanWindow()
    groups, total = paged_groups(
        db,
        Loan,
        Loan.user_id,
        page,
        conditions=window.clauses(today),
        options=(selectinload(Loan.user), selectinload(Loan.book)),
        order_by=(Loan.loan_date, Loan.id),
    )
    entries = [
        UserReportResponse(
            user=UserResponse.model_validate(loans[0].user),
            user_loans=[UserLoanResponse.model_validate(loan) for loan in loans],
        )
        for _, loans in groups
    ]
    return page.envelope(entries, total)


def build_book_report(
    db: Session,
    page: PageRequest,
    window: LoanWindow | None = None,
    today: date | None = None,
) -> Envelope[BookReportResponse]:
    """Books with the loans made of them inside the window, paginated by book."""
    window = window or LoanWindow()
    groups, total = paged_groups(
        db,
        Loan,
        Loan.book_id,
        page,
        conditions=window.clauses(today),
        options=(selectinload(Loan.user), selectinload(Loan.book)),
        order_by=(Loan.loan_date, Loan.id),
    )
    entries = [
        BookReportResponse(
            book=BookResponse.model_validate(loans[0].book),
            book_loans=[BookLoanResponse.model_validate(loan) for loan in loans],
        )
        for _, loans in groups
    ]
    return page.envelope(entries, total)
