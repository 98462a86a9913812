"""
Loans Service

Lending and returning books, editing active loans, and the loan listing.

Business Rules:
- A user may hold at most one active loan (no return_date) per book
- Lending stamps loan_date with today; returning stamps return_date
- A loan's return_date may never be before its loan_date
- Loan edits (PUT/PATCH) act on the user's active loan of the book
"""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.exceptions import (
    ACTIVE_LOAN_NOT_FOUND,
    LOAN_NOT_FOUND,
    AlreadyExistsError,
    InvalidDataError,
    NotFoundError,
)
from library_api.models.book import Book
from library_api.models.loan import Loan
from library_api.schemas.book import BookResponse
from library_api.schemas.loan import LoanReplace, LoanResponse, LoanUpdate
from library_api.schemas.paging import Envelope
from library_api.services.books import get_book
from library_api.services.loan_window import LoanWindow
from library_api.services.pagination import PageRequest
from library_api.services.users import get_user

logger = logging.getLogger(__name__)
settings = get_settings()

ALREADY_LOANED = "User already has book loaned"
RETURN_BEFORE_LOAN = "Loan date must be before the return date"


def get_loan(db: Session, loan_id: int) -> Loan:
    loan = db.get(Loan, loan_id)
    if loan is None:
        raise NotFoundError(LOAN_NOT_FOUND)
    return loan


def get_active_loan(db: Session, user_id: int, book_id: int) -> Loan | None:
    """The user's open loan of the book, if any."""
    return db.execute(
        select(Loan).where(
            Loan.user_id == user_id,
            Loan.book_id == book_id,
            Loan.return_date.is_(None),
        )
    ).scalar_one_or_none()


def _require_active_loan(db: Session, user_id: int, book_id: int) -> Loan:
    get_user(db, user_id)
    get_book(db, book_id)
    loan = get_active_loan(db, user_id, book_id)
    if loan is None:
        raise NotFoundError(ACTIVE_LOAN_NOT_FOUND)
    return loan


def _check_dates(loan_date: date, return_date: date | None) -> None:
    if return_date is not None and return_date < loan_date:
        raise InvalidDataError(RETURN_BEFORE_LOAN)


# =============================================================================
# Queries
# =============================================================================


def list_loans(
    db: Session,
    page: PageRequest,
    user_id: int | None = None,
    book_id: int | None = None,
    on: date | None = None,
    month_span: bool = False,
    today: date | None = None,
) -> Envelope[LoanResponse]:
    """
    List loans, newest id last, with optional filters.

    Args:
        db: Database session
        page: Page to return
        user_id: Only this user's loans
        book_id: Only loans of this book
        on: Only loans spanning this day
        month_span: Only loans that had lasted loan_month_span_days by
            `on` (or today) and were still open then
        today: Reference day override

    Returns:
        Envelope of LoanResponse
    """
    window = LoanWindow(
        on=on,
        duration=settings.loan_month_span_days if month_span else None,
    )
    conditions = window.clauses(today)
    if user_id is not None:
        conditions.append(Loan.user_id == user_id)
    if book_id is not None:
        conditions.append(Loan.book_id == book_id)

    count_stmt = select(func.count(Loan.id))
    stmt = select(Loan).order_by(Loan.id)
    if conditions:
        count_stmt = count_stmt.where(*conditions)
        stmt = stmt.where(*conditions)

    total = db.execute(count_stmt).scalar() or 0
    loans = db.execute(page.apply(stmt)).scalars().all()
    return page.envelope([LoanResponse.model_validate(loan) for loan in loans], total)


def list_loaned_books(db: Session, user_id: int, page: PageRequest) -> Envelope[BookResponse]:
    """Books the user currently has out."""
    get_user(db, user_id)

    active = (Loan.user_id == user_id, Loan.return_date.is_(None))
    total = db.execute(select(func.count(Loan.id)).where(*active)).scalar() or 0
    stmt = (
        select(Book)
        .join(Loan, Loan.book_id == Book.id)
        .where(*active)
        .order_by(Loan.loan_date, Book.id)
    )
    books = db.execute(page.apply(stmt)).scalars().all()
    return page.envelope([BookResponse.model_validate(book) for book in books], total)


# =============================================================================
# Mutations
# =============================================================================


def lend_book(db: Session, user_id: int, book_id: int, today: date | None = None) -> Loan:
    """
    Lend a book to a user, dated today.

    Raises:
        NotFoundError: If the user or book does not exist
        AlreadyExistsError: If the user already has this book out
    """
    get_user(db, user_id)
    get_book(db, book_id)
    if get_active_loan(db, user_id, book_id) is not None:
        raise AlreadyExistsError(ALREADY_LOANED)

    loan = Loan(user_id=user_id, book_id=book_id, loan_date=today or date.today())
    db.add(loan)
    db.commit()
    db.refresh(loan)

    logger.info(f"Book {book_id} lent to user {user_id} (loan {loan.id})")
    return loan


def return_book(db: Session, user_id: int, book_id: int, today: date | None = None) -> Loan:
    """
    Close the user's active loan of a book, dated today.

    Raises:
        NotFoundError: If the user, book or active loan does not exist
        InvalidDataError: If the loan is dated after today
    """
    loan = _require_active_loan(db, user_id, book_id)
    return_date = today or date.today()
    _check_dates(loan.loan_date, return_date)

    loan.return_date = return_date
    db.commit()
    db.refresh(loan)

    logger.info(f"Book {book_id} returned by user {user_id} (loan {loan.id})")
    return loan


def replace_loan(db: Session, user_id: int, book_id: int, loan_data: LoanReplace) -> Loan:
    """Set both dates of the active loan (PUT)."""
    loan = _require_active_loan(db, user_id, book_id)
    _check_dates(loan_data.loan_date, loan_data.return_date)

    loan.loan_date = loan_data.loan_date
    loan.return_date = loan_data.return_date
    db.commit()
    db.refresh(loan)

    logger.info(f"Loan {loan.id} replaced")
    return loan


def update_loan(db: Session, user_id: int, book_id: int, loan_data: LoanUpdate) -> Loan:
    """
    Change the dates present in the request (PATCH).

    The date rule is checked on the merged result before anything is
    written.
    """
    loan = _require_active_loan(db, user_id, book_id)
    update_data = loan_data.model_dump(exclude_unset=True, exclude_none=True)

    loan_date = update_data.get("loan_date", loan.loan_date)
    return_date = update_data.get("return_date", loan.return_date)
    _check_dates(loan_date, return_date)

    loan.loan_date = loan_date
    loan.return_date = return_date
    db.commit()
    db.refresh(loan)

    logger.info(f"Loan {loan.id} updated fields={sorted(update_data)}")
    return loan
