"""
Loan Model

One lending of a book to a user. A loan with no return_date is active:
the book is still out. A user may borrow the same book many times, but
only one loan per (user, book) may be active at once; the loans service
enforces that rule.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book
    from library_api.models.user import User


class Loan(Base):
    """
    Loan model.

    Attributes:
        id: Primary key
        user_id: Foreign key to users table
        book_id: Foreign key to books table
        loan_date: Day the book went out
        return_date: Day it came back, None while on loan
    """

    __tablename__ = "loans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Foreign keys
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    loan_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="Day the book was lent",
    )
    return_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Day the book was returned, NULL while on loan",
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="loans")
    book: Mapped["Book"] = relationship("Book", back_populates="loans")

    __table_args__ = (
        CheckConstraint(
            "return_date IS NULL OR return_date >= loan_date",
            name="check_return_after_loan",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"Loan(id={self.id}, user_id={self.user_id}, book_id={self.book_id}, "
            f"loan_date={self.loan_date}, return_date={self.return_date})"
        )
