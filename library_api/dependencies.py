"""
FastAPI Dependencies Module

Reusable components injected into route handlers:
- DbSession: one SQLAlchemy session per request
- Pagination: page_number / page_size query parameters as a PageRequest
- ReportFilters: loan_date / duration query parameters as a LoanWindow
- LoanFilters: filters of the loan listing

Instead of writing:
    def list_books(db: Session = Depends(get_db)):

routes write:
    def list_books(db: DbSession):
"""

from datetime import date
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from library_api.database import get_db
from library_api.services.loan_window import LoanWindow
from library_api.services.pagination import PageRequest

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page_number: Which page to return (1-indexed)
    - page_size: Items per page; omitted means the configured default

        GET /api/v1/books?page_number=2&page_size=20
    """

    def __init__(
        self,
        page_number: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        page_size: int | None = Query(
            default=None,
            ge=1,
            description="Number of items per page (default from settings)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page_number = page_number
        self.page_size = page_size

    @property
    def page(self) -> PageRequest:
        return PageRequest.create(self.page_number, self.page_size)


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Report Filters
# =============================================================================
class ReportFilterParams:
    """
    Loan window for the user and book reports.

    - loan_date: keep loans the book was out on that day
    - duration: keep loans that had lasted at least this many days (at
      loan_date when given, else today) and were still open then
    """

    def __init__(
        self,
        loan_date: date | None = Query(
            default=None,
            description="Only loans spanning this day",
            examples=["2024-03-01"],
        ),
        duration: int | None = Query(
            default=None,
            ge=0,
            le=36500,
            description="Only loans open for at least this many days (up to 100 years)",
            examples=[7, 30],
        ),
    ) -> None:
        self.loan_date = loan_date
        self.duration = duration

    @property
    def window(self) -> LoanWindow:
        return LoanWindow(on=self.loan_date, duration=self.duration)


ReportFilters = Annotated[ReportFilterParams, Depends()]


# =============================================================================
# Loan Listing Filters
# =============================================================================
class LoanFilterParams:
    """Filters of GET /loans. All optional, combined with AND."""

    def __init__(
        self,
        user_id: int | None = Query(default=None, description="Borrower"),
        book_id: int | None = Query(default=None, description="Book lent"),
        on: date | None = Query(
            default=None,
            alias="date",
            description="Only loans spanning this day",
        ),
        month_span: bool = Query(
            default=False,
            description="Only loans open for at least a month",
        ),
    ) -> None:
        self.user_id = user_id
        self.book_id = book_id
        self.on = on
        self.month_span = month_span


LoanFilters = Annotated[LoanFilterParams, Depends()]
