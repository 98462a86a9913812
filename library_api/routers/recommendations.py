"""
Recommendations Router

Ranks the books a user has neither borrowed nor reviewed by their
average rating (highest first, ties by title).
"""

from fastapi import APIRouter, Request

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination
from library_api.schemas import Envelope, RecommendationResponse
from library_api.services.rate_limiter import limiter
from library_api.services.recommendations import recommend_for_user

settings = get_settings()

router = APIRouter(tags=["Recommendations"])


@router.get(
    "/users/{user_id}/recommendations",
    response_model=Envelope[RecommendationResponse],
    summary="Recommended books for a user",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_default)
def get_recommendations(
    request: Request,
    user_id: int,
    db: DbSession,
    pagination: Pagination,
):
    return recommend_for_user(db, user_id, pagination.page)
