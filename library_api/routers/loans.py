"""
Loans Router

Endpoints:
- GET    /loans                               - List loans (filterable)
- GET    /loans/{loan_id}                     - Get one loan
- GET    /users/{user_id}/books               - Books the user has out
- POST   /users/{user_id}/books/{book_id}     - Lend a book (dated today)
- DELETE /users/{user_id}/books/{book_id}     - Return a book (dated today)
- PUT    /users/{user_id}/books/{book_id}     - Set both dates of the active loan
- PATCH  /users/{user_id}/books/{book_id}     - Change dates of the active loan
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, LoanFilters, Pagination
from library_api.schemas import (
    BookResponse,
    Envelope,
    LoanReplace,
    LoanResponse,
    LoanUpdate,
)
from library_api.services import loans as loans_service
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(tags=["Loans"])


@router.get(
    "/loans",
    response_model=Envelope[LoanResponse],
    summary="List loans",
    description=(
        "Filter by user_id, book_id, date (loans spanning that day) and "
        "month_span (loans open for at least a month)."
    ),
)
@limiter.limit(settings.rate_limit_default)
def list_loans(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: LoanFilters,
):
    return loans_service.list_loans(
        db,
        pagination.page,
        user_id=filters.user_id,
        book_id=filters.book_id,
        on=filters.on,
        month_span=filters.month_span,
    )


@router.get("/loans/{loan_id}", response_model=LoanResponse, summary="Get a loan")
@limiter.limit(settings.rate_limit_default)
def get_loan(
    request: Request,
    loan_id: int,
    db: DbSession,
) -> LoanResponse:
    return LoanResponse.model_validate(loans_service.get_loan(db, loan_id))


@router.get(
    "/users/{user_id}/books",
    response_model=Envelope[BookResponse],
    summary="Books on loan to a user",
)
@limiter.limit(settings.rate_limit_default)
def list_loaned_books(
    request: Request,
    user_id: int,
    db: DbSession,
    pagination: Pagination,
):
    return loans_service.list_loaned_books(db, user_id, pagination.page)


@router.post(
    "/users/{user_id}/books/{book_id}",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Lend a book",
    responses={409: {"description": "User already has book loaned"}},
)
@limiter.limit(settings.rate_limit_write)
def lend_book(
    request: Request,
    user_id: int,
    book_id: int,
    db: DbSession,
) -> LoanResponse:
    return LoanResponse.model_validate(loans_service.lend_book(db, user_id, book_id))


@router.delete(
    "/users/{user_id}/books/{book_id}",
    response_model=LoanResponse,
    summary="Return a book",
)
@limiter.limit(settings.rate_limit_write)
def return_book(
    request: Request,
    user_id: int,
    book_id: int,
    db: DbSession,
) -> LoanResponse:
    return LoanResponse.model_validate(loans_service.return_book(db, user_id, book_id))


@router.put(
    "/users/{user_id}/books/{book_id}",
    response_model=LoanResponse,
    summary="Replace the dates of an active loan",
    responses={400: {"description": "Loan date must be before the return date"}},
)
@limiter.limit(settings.rate_limit_write)
def replace_loan(
    request: Request,
    user_id: int,
    book_id: int,
    loan_data: LoanReplace,
    db: DbSession,
) -> LoanResponse:
    loan = loans_service.replace_loan(db, user_id, book_id, loan_data)
    return LoanResponse.model_validate(loan)


@router.patch(
    "/users/{user_id}/books/{book_id}",
    response_model=LoanResponse,
    summary="Update the dates of an active loan",
    responses={400: {"description": "Loan date must be before the return date"}},
)
@limiter.limit(settings.rate_limit_write)
def update_loan(
    request: Request,
    user_id: int,
    book_id: int,
    loan_data: LoanUpdate,
    db: DbSession,
) -> LoanResponse:
    loan = loans_service.update_loan(db, user_id, book_id, loan_data)
    return LoanResponse.model_validate(loan)
