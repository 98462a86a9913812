"""
Reviews Router

A review is addressed by its user and book, so every single-review route
exists twice: under /users/{user_id}/reviews/{book_id} and under
/books/{book_id}/reviews/{user_id}. Both call the same service function.

This router is registered before the books router so that
/books/reviews is not taken for /books/{book_id}.
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    BookReviewResponse,
    BookReviewsResponse,
    Envelope,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    UserReviewResponse,
)
from library_api.services import reviews as reviews_service
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "User, book or review not found"},
    },
)

USER_REVIEW = "/users/{user_id}/reviews/{book_id}"
BOOK_REVIEW = "/books/{book_id}/reviews/{user_id}"


# =============================================================================
# Listings
# =============================================================================


@router.get(
    "/books/reviews",
    response_model=Envelope[BookReviewsResponse],
    summary="Reviews grouped by book",
    description="Every reviewed book with all its reviews, paginated by book.",
)
@limiter.limit(settings.rate_limit_default)
def list_reviews_by_book(
    request: Request,
    db: DbSession,
    pagination: Pagination,
):
    return reviews_service.list_reviews_by_book(db, pagination.page)


@router.get(
    "/books/{book_id}/reviews",
    response_model=Envelope[BookReviewResponse],
    summary="Reviews of a book",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
):
    return reviews_service.list_book_reviews(db, book_id, pagination.page)


@router.get(
    "/users/{user_id}/reviews",
    response_model=Envelope[UserReviewResponse],
    summary="Reviews written by a user",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: int,
    db: DbSession,
    pagination: Pagination,
):
    return reviews_service.list_user_reviews(db, user_id, pagination.page)


# =============================================================================
# Single Review
# =============================================================================


@router.get(USER_REVIEW, response_model=ReviewResponse, summary="Get a review")
@router.get(BOOK_REVIEW, response_model=ReviewResponse, summary="Get a review")
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    user_id: int,
    book_id: int,
    db: DbSession,
) -> ReviewResponse:
    return ReviewResponse.model_validate(reviews_service.get_review(db, user_id, book_id))


@router.post(
    USER_REVIEW,
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    responses={409: {"description": "Review already exists"}},
)
@router.post(
    BOOK_REVIEW,
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    responses={409: {"description": "Review already exists"}},
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    user_id: int,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
) -> ReviewResponse:
    review = reviews_service.create_review(db, user_id, book_id, review_data)
    return ReviewResponse.model_validate(review)


@router.put(USER_REVIEW, response_model=ReviewResponse, summary="Replace a review")
@router.put(BOOK_REVIEW, response_model=ReviewResponse, summary="Replace a review")
@limiter.limit(settings.rate_limit_write)
def replace_review(
    request: Request,
    user_id: int,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
) -> ReviewResponse:
    review = reviews_service.replace_review(db, user_id, book_id, review_data)
    return ReviewResponse.model_validate(review)


@router.patch(USER_REVIEW, response_model=ReviewResponse, summary="Update a review")
@router.patch(BOOK_REVIEW, response_model=ReviewResponse, summary="Update a review")
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    user_id: int,
    book_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
) -> ReviewResponse:
    review = reviews_service.update_review(db, user_id, book_id, review_data)
    return ReviewResponse.model_validate(review)


@router.delete(USER_REVIEW, status_code=status.HTTP_204_NO_CONTENT, summary="Delete a review")
@router.delete(BOOK_REVIEW, status_code=status.HTTP_204_NO_CONTENT, summary="Delete a review")
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    user_id: int,
    book_id: int,
    db: DbSession,
) -> None:
    reviews_service.delete_review(db, user_id, book_id)
