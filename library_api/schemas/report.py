"""
Report Schemas

A report entry is one user (or book) with every loan that matched the
report's window. The entries are what gets paginated; the nested loan
lists are always complete.
"""

from pydantic import BaseModel, Field

from library_api.schemas.book import BookResponse
from library_api.schemas.loan import BookLoanResponse, UserLoanResponse
from library_api.schemas.user import UserResponse


class UserReportResponse(BaseModel):
    user: UserResponse
    user_loans: list[UserLoanResponse] = Field(default_factory=list)


class BookReportResponse(BaseModel):
    book: BookResponse
    book_loans: list[BookLoanResponse] = Field(default_factory=list)
