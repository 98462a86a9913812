"""
Loan Pydantic Schemas

Schemas:
- LoanReplace: Both dates of the active loan (PUT)
- LoanUpdate: Either date of the active loan (PATCH)
- LoanResponse: A loan row as returned by GET /loans
- UserLoanResponse: A loan seen from the user's side (which book, when)
- BookLoanResponse: A loan seen from the book's side (which user, when)
- BookDetailsResponse / UserDetailsResponse: a record plus one page of
  its loan history

The return-date-before-loan-date rule is checked by the loans service
against the stored loan, so a PATCH that only moves one date is
validated too.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from library_api.schemas.book import BookResponse
from library_api.schemas.paging import Envelope
from library_api.schemas.user import UserResponse


class LoanReplace(BaseModel):
    """Replace both dates of a loan. Omitting return_date marks it active."""

    loan_date: date = Field(..., description="Day the book was lent")
    return_date: date | None = Field(
        default=None, description="Day the book came back"
    )


class LoanUpdate(BaseModel):
    """Partial loan update, only provided fields change."""

    loan_date: date | None = None
    return_date: date | None = None


class LoanResponse(BaseModel):
    id: int
    user_id: int
    book_id: int
    loan_date: date
    return_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class UserLoanResponse(BaseModel):
    """One loan in a user's history."""

    book: BookResponse
    loan_date: date
    return_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class BookLoanResponse(BaseModel):
    """One loan in a book's history."""

    user: UserResponse
    loan_date: date
    return_date: date | None = None

    model_config = ConfigDict(from_attributes=True)


class BookDetailsResponse(BookResponse):
    """Book with one page of who borrowed it."""

    loan_history: Envelope[BookLoanResponse]


class UserDetailsResponse(UserResponse):
    """User with one page of what they borrowed."""

    loan_history: Envelope[UserLoanResponse]
