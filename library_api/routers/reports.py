"""
Reports Router

Loan reports grouped per user and per book. The groups are paginated;
each group lists every loan that matched the filters.

    GET /api/v1/reports/users?loan_date=2024-03-01
    GET /api/v1/reports/books?duration=30&page_size=10
"""

from fastapi import APIRouter, Request

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination, ReportFilters
from library_api.schemas import BookReportResponse, Envelope, UserReportResponse
from library_api.services.rate_limiter import limiter
from library_api.services.reports import build_book_report, build_user_report

settings = get_settings()

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/users",
    response_model=Envelope[UserReportResponse],
    summary="Loans per user",
)
@limiter.limit(settings.rate_limit_default)
def user_report(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: ReportFilters,
):
    return build_user_report(db, pagination.page, filters.window)


@router.get(
    "/books",
    response_model=Envelope[BookReportResponse],
    summary="Loans per book",
)
@limiter.limit(settings.rate_limit_default)
def book_report(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: ReportFilters,
):
    return build_book_report(db, pagination.page, filters.window)
