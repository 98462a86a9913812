"""
Review Model

A user's rating of a book.

Business Rules:
- One review per user per book (unique constraint)
- Rating must be 0-5
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book
    from library_api.models.user import User


class Review(Base):
    """
    Review model for book ratings.

    Attributes:
        id: Primary key
        book_id: Foreign key to books table
        user_id: Foreign key to users table
        rating: 0-5 star rating
    """

    __tablename__ = "reviews"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Foreign keys
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 0-5 stars",
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")

    # Table constraints
    __table_args__ = (
        # One review per user per book
        UniqueConstraint("user_id", "book_id", name="unique_user_book_review"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_rating_range"),
    )

    def __repr__(self) -> str:
        return f"Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})"
