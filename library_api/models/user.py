"""
User Model

A library member who borrows and reviews books.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.loan import Loan
    from library_api.models.review import Review


class User(Base):
    """
    User model for library members.

    Attributes:
        id: Primary key
        name: Full name
        address: Postal address, optional
        email: Contact email (unique)
        loans: Every loan made by this user
        reviews: Reviews written by this user
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Full name",
    )
    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Postal address",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Contact email, one account per address",
    )

    # Relationships
    loans: Mapped[list["Loan"]] = relationship(
        "Loan",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}')"
