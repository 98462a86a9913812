"""
Users Router

CRUD endpoints for library members.
"""

from fastapi import APIRouter, Request, status

from library_api.config import get_settings
from library_api.dependencies import DbSession, Pagination
from library_api.schemas import (
    Envelope,
    UserCreate,
    UserDetailsResponse,
    UserResponse,
    UserUpdate,
)
from library_api.services import users as users_service
from library_api.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        404: {"description": "User not found"},
    },
)


@router.get("", response_model=Envelope[UserResponse], summary="List all users")
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    pagination: Pagination,
):
    return users_service.list_users(db, pagination.page)


@router.get(
    "/{user_id}",
    response_model=UserDetailsResponse,
    summary="Get a user by ID",
    description="User details with one page of their loan history.",
)
@limiter.limit(settings.rate_limit_default)
def get_user(
    request: Request,
    user_id: int,
    db: DbSession,
    pagination: Pagination,
) -> UserDetailsResponse:
    return users_service.get_user_details(db, user_id, pagination.page)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    responses={409: {"description": "User with that email already exists"}},
)
@limiter.limit(settings.rate_limit_write)
def create_user(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    user = users_service.create_user(db, user_data)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, summary="Replace a user")
@limiter.limit(settings.rate_limit_write)
def replace_user(
    request: Request,
    user_id: int,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    user = users_service.replace_user(db, user_id, user_data)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update a user")
@limiter.limit(settings.rate_limit_write)
def update_user(
    request: Request,
    user_id: int,
    user_data: UserUpdate,
    db: DbSession,
) -> UserResponse:
    user = users_service.update_user(db, user_id, user_data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Deletes the user together with their loans and reviews.",
)
@limiter.limit(settings.rate_limit_write)
def delete_user(
    request: Request,
    user_id: int,
    db: DbSession,
) -> None:
    users_service.delete_user(db, user_id)
