"""
Recommendation Ranker

Suggests books to a user.

Algorithm:
1. Candidates are books the user has never borrowed AND never reviewed.
2. Each candidate carries its average rating over ALL reviews of the book.
3. Order by average rating descending, ties by title ascending, then by
   id so the order is total. Books nobody reviewed come last.
4. The candidate count is a separate COUNT query, so paging metadata
   does not depend on the page being read.

WHY Handwritten SQL?
====================
The ranking needs an anti-join on two tables, an outer join for the
average and a "NULLs last" ordering that PostgreSQL and SQLite spell
differently. One explicit, parameterized statement per variant keeps the
whole ranking readable in one place; RecommendationQuery holds both.

Title ties compare titles code point by code point ("Banana" before
"apple"). SQLite does that by default; on PostgreSQL the ranked
statement adds COLLATE "C" so a locale collation cannot reorder them.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import TextClause, select, text
from sqlalchemy.orm import Session

from library_api.exceptions import USER_NOT_FOUND, NotFoundError
from library_api.models.book import Book
from library_api.models.user import User
from library_api.schemas.book import BookResponse
from library_api.schemas.paging import Envelope
from library_api.schemas.recommendation import RecommendationResponse
from library_api.services.pagination import PageRequest

logger = logging.getLogger(__name__)


# Books the user has neither borrowed nor reviewed
_CANDIDATE_FILTER = """
    NOT EXISTS (
        SELECT 1 FROM loans l
        WHERE l.book_id = b.id AND l.user_id = :user_id
    )
    AND NOT EXISTS (
        SELECT 1 FROM reviews rv
        WHERE rv.book_id = b.id AND rv.user_id = :user_id
    )
"""

_COUNT_SQL = text(f"""
    SELECT COUNT(*)
    FROM books b
    WHERE {_CANDIDATE_FILTER}
""")

_RANKED_TEMPLATE = """
    SELECT b.id AS book_id,
           AVG(r.rating) AS average_rating,
           COUNT(r.id) AS review_count
    FROM books b
    LEFT JOIN reviews r ON r.book_id = b.id
    WHERE {candidate_filter}
    GROUP BY b.id, b.title
    ORDER BY CASE WHEN COUNT(r.id) = 0 THEN 1 ELSE 0 END,
             AVG(r.rating) DESC,
             b.title{title_collation} ASC,
             b.id ASC
    LIMIT :limit OFFSET :offset
"""

# Collation that orders text by code point, per dialect
_BINARY_COLLATION = {
    "postgresql": ' COLLATE "C"',
}


def ranked_sql(dialect_name: str) -> TextClause:
    """The ranked-page statement for a database dialect."""
    collation = _BINARY_COLLATION.get(dialect_name, "")
    return text(
        _RANKED_TEMPLATE.format(
            candidate_filter=_CANDIDATE_FILTER, title_collation=collation
        )
    )


@dataclass(frozen=True)
class RankedCandidate:
    """One row of the ranked candidate list."""

    book_id: int
    average_rating: float | None
    review_count: int


class RecommendationQuery:
    """
    The two statements behind a recommendation page, bound to one user.

    Usage:
        query = RecommendationQuery(db, user_id=3)
        total = query.count()
        rows = query.page(limit=10, offset=0)
    """

    def __init__(self, db: Session, user_id: int) -> None:
        self.db = db
        self.user_id = user_id

    def count(self) -> int:
        return self.db.execute(_COUNT_SQL, {"user_id": self.user_id}).scalar() or 0

    def page(self, limit: int, offset: int) -> list[RankedCandidate]:
        """Ranked candidates from offset, at most limit of them."""
        if limit <= 0:
            return []
        rows = self.db.execute(
            ranked_sql(self.db.get_bind().dialect.name),
            {"user_id": self.user_id, "limit": limit, "offset": max(offset, 0)},
        ).all()
        return [
            RankedCandidate(
                book_id=row.book_id,
                average_rating=(
                    float(row.average_rating) if row.review_count else None
                ),
                review_count=row.review_count,
            )
            for row in rows
        ]


def recommend_for_user(
    db: Session,
    user_id: int,
    page: PageRequest,
) -> Envelope[RecommendationResponse]:
    """
    Rank books for a user and return one page of them.

    Args:
        db: Database session
        user_id: User to recommend for
        page: Page of the ranked list

    Returns:
        Envelope of RecommendationResponse in rank order

    Raises:
        NotFoundError: If the user does not exist
    """
    if db.get(User, user_id) is None:
        raise NotFoundError(USER_NOT_FOUND)

    query = RecommendationQuery(db, user_id)
    total = query.count()
    limit = page.page_max_size if page.in_range else 0
    ranked = query.page(limit=limit, offset=page.offset)

    books = {}
    if ranked:
        book_ids = [candidate.book_id for candidate in ranked]
        books = {
            book.id: book
            for book in db.execute(select(Book).where(Book.id.in_(book_ids))).scalars()
        }

    items = [
        RecommendationResponse(
            book=BookResponse.model_validate(books[candidate.book_id]),
            average_rating=candidate.average_rating,
            review_count=candidate.review_count,
        )
        for candidate in ranked
    ]
    logger.debug(
        f"Recommendations for user {user_id}: {total} candidates, "
        f"page {page.page_number} returned {len(items)}"
    )
    return page.envelope(items, total)
