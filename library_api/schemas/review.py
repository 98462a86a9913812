"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Rate a book (POST/PUT)
- ReviewUpdate: Change the rating (PATCH)
- ReviewResponse: A review row
- UserReviewResponse: A review listed under its author (which book)
- BookReviewResponse: A review listed under its book (which user)
- BookReviewsResponse: A book with all of its reviews

Business Rules:
- Rating must be 0-5 (validated here and by a database constraint)
- One review per user per book (enforced at database level)
"""

from pydantic import BaseModel, ConfigDict, Field

from library_api.schemas.book import BookResponse
from library_api.schemas.user import UserResponse


class ReviewCreate(BaseModel):
    """
    Schema for creating or replacing a review.

    Example request body:
    {
        "rating": 4
    }
    """

    rating: int = Field(
        ...,
        ge=0,
        le=5,
        description="Rating from 0 to 5 stars",
        examples=[4, 5],
    )


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=0, le=5)


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    book_id: int
    rating: int

    model_config = ConfigDict(from_attributes=True)


class UserReviewResponse(BaseModel):
    book: BookResponse
    rating: int

    model_config = ConfigDict(from_attributes=True)


class BookReviewResponse(BaseModel):
    user: UserResponse
    rating: int

    model_config = ConfigDict(from_attributes=True)


class BookReviewsResponse(BaseModel):
    """
    All reviews of one book.

    average_rating is None when the book has no reviews.
    """

    book: BookResponse
    average_rating: float | None = None
    reviews: list[BookReviewResponse] = Field(default_factory=list)
