"""
Reviews Service

Rating books. A review is addressed by (user_id, book_id) since each
user reviews a book at most once.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from library_api.exceptions import REVIEW_NOT_FOUND, AlreadyExistsError, NotFoundError
from library_api.models.review import Review
from library_api.schemas.book import BookResponse
from library_api.schemas.paging import Envelope
from library_api.schemas.review import (
    BookReviewResponse,
    BookReviewsResponse,
    ReviewCreate,
    ReviewUpdate,
    UserReviewResponse,
)
from library_api.services.books import get_book
from library_api.services.pagination import PageRequest
from library_api.services.reports import paged_groups
from library_api.services.users import get_user

logger = logging.getLogger(__name__)

REVIEW_EXISTS = "Review already exists"


def _average(ratings: list[int]) -> float | None:
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def get_review(db: Session, user_id: int, book_id: int) -> Review:
    """
    Get the user's review of a book.

    Raises:
        NotFoundError: If the user, the book or the review does not exist
    """
    get_user(db, user_id)
    get_book(db, book_id)
    review = db.execute(
        select(Review).where(Review.user_id == user_id, Review.book_id == book_id)
    ).scalar_one_or_none()
    if review is None:
        raise NotFoundError(REVIEW_NOT_FOUND)
    return review


# =============================================================================
# Queries
# =============================================================================


def list_reviews_by_book(db: Session, page: PageRequest) -> Envelope[BookReviewsResponse]:
    """
    Reviewed books with all their reviews, paginated by book.

    Books without reviews are not listed.
    """
    groups, total = paged_groups(
        db,
        Review,
        Review.book_id,
        page,
        options=(selectinload(Review.book), selectinload(Review.user)),
        order_by=(Review.user_id,),
    )
    entries = [
        BookReviewsResponse(
            book=BookResponse.model_validate(reviews[0].book),
            average_rating=_average([review.rating for review in reviews]),
            reviews=[BookReviewResponse.model_validate(review) for review in reviews],
        )
        for _, reviews in groups
    ]
    return page.envelope(entries, total)


def list_book_reviews(db: Session, book_id: int, page: PageRequest) -> Envelope[BookReviewResponse]:
    get_book(db, book_id)

    condition = Review.book_id == book_id
    total = db.execute(select(func.count(Review.id)).where(condition)).scalar() or 0
    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(condition)
        .order_by(Review.user_id)
    )
    reviews = db.execute(page.apply(stmt)).scalars().all()
    return page.envelope(
        [BookReviewResponse.model_validate(review) for review in reviews], total
    )


def list_user_reviews(db: Session, user_id: int, page: PageRequest) -> Envelope[UserReviewResponse]:
    get_user(db, user_id)

    condition = Review.user_id == user_id
    total = db.execute(select(func.count(Review.id)).where(condition)).scalar() or 0
    stmt = (
        select(Review)
        .options(selectinload(Review.book))
        .where(condition)
        .order_by(Review.book_id)
    )
    reviews = db.execute(page.apply(stmt)).scalars().all()
    return page.envelope(
        [UserReviewResponse.model_validate(review) for review in reviews], total
    )


# =============================================================================
# Mutations
# =============================================================================


def create_review(db: Session, user_id: int, book_id: int, review_data: ReviewCreate) -> Review:
    """
    Record a user's rating of a book.

    Raises:
        NotFoundError: If the user or book does not exist
        AlreadyExistsError: If the user already reviewed the book
    """
    get_user(db, user_id)
    get_book(db, book_id)
    existing = db.execute(
        select(Review.id).where(Review.user_id == user_id, Review.book_id == book_id)
    ).first()
    if existing is not None:
        raise AlreadyExistsError(REVIEW_EXISTS)

    review = Review(user_id=user_id, book_id=book_id, rating=review_data.rating)
    db.add(review)
    db.commit()
    db.refresh(review)

    logger.info(f"Review created: user {user_id} rated book {book_id} {review.rating}")
    return review


def replace_review(db: Session, user_id: int, book_id: int, review_data: ReviewCreate) -> Review:
    review = get_review(db, user_id, book_id)
    review.rating = review_data.rating
    db.commit()
    db.refresh(review)

    logger.info(f"Review replaced: user {user_id}, book {book_id}")
    return review


def update_review(db: Session, user_id: int, book_id: int, review_data: ReviewUpdate) -> Review:
    review = get_review(db, user_id, book_id)
    if review_data.rating is not None:
        review.rating = review_data.rating
    db.commit()
    db.refresh(review)

    logger.info(f"Review updated: user {user_id}, book {book_id}")
    return review


def delete_review(db: Session, user_id: int, book_id: int) -> None:
    review = get_review(db, user_id, book_id)
    db.delete(review)
    db.commit()
    logger.info(f"Review deleted: user {user_id}, book {book_id}")
