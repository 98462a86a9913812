"""
Domain Exceptions

Services raise these instead of HTTP errors so the same logic can be
called from routes, scripts and tests. main.py registers one exception
handler per class to turn them into JSON responses:

- NotFoundError      -> 404
- AlreadyExistsError -> 409
- InvalidDataError   -> 400
"""

from fastapi import status


class LibraryError(Exception):
    """Base class for errors the API reports back to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    """A referenced user, book, loan or review does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExistsError(LibraryError):
    """The record would duplicate a unique one (ISBN, email, review, active loan)."""

    status_code = status.HTTP_409_CONFLICT


class InvalidDataError(LibraryError):
    """Input breaks a structural rule, e.g. a return date before the loan date."""

    status_code = status.HTTP_400_BAD_REQUEST


# Messages shared by several services
USER_NOT_FOUND = "User not found"
BOOK_NOT_FOUND = "Book not found"
LOAN_NOT_FOUND = "Loan not found"
ACTIVE_LOAN_NOT_FOUND = "User does not have the book loaned"
REVIEW_NOT_FOUND = "Review not found"
