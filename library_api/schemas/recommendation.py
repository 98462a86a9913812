"""Recommendation schema."""

from pydantic import BaseModel, Field

from library_api.schemas.book import BookResponse


class RecommendationResponse(BaseModel):
    """
    A book suggested to a user.

    average_rating is computed over every review of the book; books
    nobody has reviewed carry None and rank after all rated books.
    """

    book: BookResponse
    average_rating: float | None = Field(
        default=None, description="Mean rating across all reviews"
    )
    review_count: int = Field(default=0, ge=0)
