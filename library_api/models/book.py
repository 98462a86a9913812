"""
Book Model

A title held by the library. Copies are not tracked: a book is either on
loan to a user (an active Loan row) or not.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.loan import Loan
    from library_api.models.review import Review


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Fields:
    - title: Book title (required)
    - author: Author name as printed on the cover (required)
    - publish_date: Publication date (required)
    - isbn: International Standard Book Number (unique, required)

    Relationships:
    - loans: One-to-Many, every loan of this book past and present
    - reviews: One-to-Many, reviews left by users

    Deleting a book deletes its loans and reviews.

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            publish_date=date(1949, 6, 8),
            isbn="9780451524935",
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Author name"
    )

    # Date (not DateTime) because we only care about the day
    publish_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Date of publication"
    )

    # Stored without hyphens, see BookBase.validate_isbn
    isbn: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
        comment="International Standard Book Number"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    loans: Mapped[list["Loan"]] = relationship(
        "Loan",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
