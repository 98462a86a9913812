"""
SQLAlchemy Models Package

Model Relationships:
- User <-> Book through Loan: a user borrows many books over time,
  a book is lent to many users over time
- User <-> Book through Review: at most one review per user per book

Import all models here to:
1. Make them available as: from library_api.models import Book, Loan
2. Register every table on Base.metadata before create_all()
"""

from library_api.models.book import Book
from library_api.models.user import User
from library_api.models.loan import Loan
from library_api.models.review import Review

__all__ = [
    "Book",
    "User",
    "Loan",
    "Review",
]
