"""
Books Router

CRUD endpoints for books. Listings are paginated with page_number and
page_size; the details endpoint pages the book's loan history the same
way.
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    BookCreate,
    BookDetailsResponse,
    BookResponse,
    BookUpdate,
    Envelope,
)
from library_api.services import books as books_service
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=Envelope[BookResponse],
    summary="List all books",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
):
    return books_service.list_books(db, pagination.page)


@router.get(
    "/{book_id}",
    response_model=BookDetailsResponse,
    summary="Get a book by ID",
    description="Book details with one page of its loan history.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
) -> BookDetailsResponse:
    return books_service.get_book_details(db, book_id, pagination.page)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    responses={409: {"description": "Book with that ISBN already exists"}},
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
) -> BookResponse:
    """
    Create a new book.

    The ISBN may contain hyphens; it is stored without them.
    """
    book = books_service.create_book(db, book_data)
    return BookResponse.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Replace a book",
)
@limiter.limit(settings.rate_limit_write)
def replace_book(
    request: Request,
    book_id: int,
    book_data: BookCreate,
    db: DbSession,
) -> BookResponse:
    book = books_service.replace_book(db, book_id, book_data)
    return BookResponse.model_validate(book)


@router.patch(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Only fields present in the body are changed.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
) -> BookResponse:
    book = books_service.update_book(db, book_id, book_data)
    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Deletes the book together with its loans and reviews.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> None:
    books_service.delete_book(db, book_id)
