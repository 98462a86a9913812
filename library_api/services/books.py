"""
Books Service

CRUD for books plus the book details view (book + loan history page).

Business Rules:
- ISBN is unique; creating or changing a book to an ISBN another book
  already has raises AlreadyExistsError
- Deleting a book deletes its loans and reviews
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from library_api.exceptions import BOOK_NOT_FOUND, AlreadyExistsError, NotFoundError
from library_api.models.book import Book
from library_api.models.loan import Loan
from library_api.schemas.book import BookCreate, BookResponse, BookUpdate
from library_api.schemas.loan import BookDetailsResponse, BookLoanResponse
from library_api.schemas.paging import Envelope
from library_api.services.pagination import PageRequest

logger = logging.getLogger(__name__)

ISBN_TAKEN = "Book with that ISBN already exists"


def get_book(db: Session, book_id: int) -> Book:
    """
    Get a book by ID.

    Raises:
        NotFoundError: If no book has that ID
    """
    book = db.get(Book, book_id)
    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return book


def _ensure_isbn_free(db: Session, isbn: str, book_id: int | None = None) -> None:
    stmt = select(Book.id).where(Book.isbn == isbn)
    if book_id is not None:
        stmt = stmt.where(Book.id != book_id)
    if db.execute(stmt).first() is not None:
        raise AlreadyExistsError(ISBN_TAKEN)


def list_books(db: Session, page: PageRequest) -> Envelope[BookResponse]:
    total = db.execute(select(func.count(Book.id))).scalar() or 0
    books = db.execute(page.apply(select(Book).order_by(Book.id))).scalars().all()
    return page.envelope([BookResponse.model_validate(book) for book in books], total)


def get_book_details(db: Session, book_id: int, page: PageRequest) -> BookDetailsResponse:
    """
    A book with one page of its loan history, newest loan first.

    Args:
        db: Database session
        book_id: Book to describe
        page: Page of the loan history

    Returns:
        BookDetailsResponse

    Raises:
        NotFoundError: If the book does not exist
    """
    book = get_book(db, book_id)

    total = db.execute(
        select(func.count(Loan.id)).where(Loan.book_id == book_id)
    ).scalar() or 0
    stmt = (
        select(Loan)
        .options(selectinload(Loan.user))
        .where(Loan.book_id == book_id)
        .order_by(Loan.loan_date.desc(), Loan.id.desc())
    )
    loans = db.execute(page.apply(stmt)).scalars().all()

    return BookDetailsResponse(
        **BookResponse.model_validate(book).model_dump(),
        loan_history=page.envelope(
            [BookLoanResponse.model_validate(loan) for loan in loans], total
        ).model_dump(),
    )


def create_book(db: Session, book_data: BookCreate) -> Book:
    _ensure_isbn_free(db, book_data.isbn)

    book = Book(**book_data.model_dump())
    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book created: {book.id} ({book.isbn})")
    return book


def replace_book(db: Session, book_id: int, book_data: BookCreate) -> Book:
    """Overwrite every field of a book (PUT)."""
    book = get_book(db, book_id)
    _ensure_isbn_free(db, book_data.isbn, book_id)

    for field, value in book_data.model_dump().items():
        setattr(book, field, value)
    db.commit()
    db.refresh(book)

    logger.info(f"Book replaced: {book_id}")
    return book


def update_book(db: Session, book_id: int, book_data: BookUpdate) -> Book:
    """
    Update only the fields present in the request (PATCH).

    model_dump(exclude_unset=True) returns only fields that were set, so
    an omitted field keeps its value.
    """
    book = get_book(db, book_id)
    update_data = book_data.model_dump(exclude_unset=True, exclude_none=True)

    if "isbn" in update_data:
        _ensure_isbn_free(db, update_data["isbn"], book_id)

    for field, value in update_data.items():
        setattr(book, field, value)
    db.commit()
    db.refresh(book)

    logger.info(f"Book updated: {book_id} fields={sorted(update_data)}")
    return book


def delete_book(db: Session, book_id: int) -> None:
    book = get_book(db, book_id)
    db.delete(book)
    db.commit()
    logger.info(f"Book deleted: {book_id}")
