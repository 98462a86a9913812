"""
Pydantic Schemas Package

Request/response models for the Library Lending API.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when patching (all optional)
- XxxResponse: Fields returned in API responses

Every listing is wrapped in Envelope[T], which pairs one page of items
with its Paging metadata.
"""

from library_api.schemas.paging import Envelope, Paging
from library_api.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from library_api.schemas.user import (
    UserBase,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from library_api.schemas.loan import (
    BookDetailsResponse,
    BookLoanResponse,
    LoanReplace,
    LoanResponse,
    LoanUpdate,
    UserDetailsResponse,
    UserLoanResponse,
)
from library_api.schemas.review import (
    BookReviewResponse,
    BookReviewsResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    UserReviewResponse,
)
from library_api.schemas.report import BookReportResponse, UserReportResponse
from library_api.schemas.recommendation import RecommendationResponse

__all__ = [
    # Paging
    "Envelope",
    "Paging",
    # Book
    "BookBase",
    "BookCreate",
    "BookResponse",
    "BookUpdate",
    # User
    "UserBase",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    # Loan
    "BookDetailsResponse",
    "BookLoanResponse",
    "LoanReplace",
    "LoanResponse",
    "LoanUpdate",
    "UserDetailsResponse",
    "UserLoanResponse",
    # Review
    "BookReviewResponse",
    "BookReviewsResponse",
    "ReviewCreate",
    "ReviewResponse",
    "ReviewUpdate",
    "UserReviewResponse",
    # Reports
    "BookReportResponse",
    "UserReportResponse",
    "RecommendationResponse",
]
