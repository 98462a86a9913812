"""
Users Service

CRUD for library members plus the user details view.

Business Rules:
- Email is unique (AlreadyExistsError on conflict)
- Deleting a user deletes their loans and reviews
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from library_api.exceptions import USER_NOT_FOUND, AlreadyExistsError, NotFoundError
from library_api.models.loan import Loan
from library_api.models.user import User
from library_api.schemas.loan import UserDetailsResponse, UserLoanResponse
from library_api.schemas.paging import Envelope
from library_api.schemas.user import UserCreate, UserResponse, UserUpdate
from library_api.services.pagination import PageRequest

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with that email already exists"


def get_user(db: Session, user_id: int) -> User:
    """
    Get a user by ID.

    Raises:
        NotFoundError: If no user has that ID
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def _ensure_email_free(db: Session, email: str, user_id: int | None = None) -> None:
    stmt = select(User.id).where(func.lower(User.email) == email.lower())
    if user_id is not None:
        stmt = stmt.where(User.id != user_id)
    if db.execute(stmt).first() is not None:
        raise AlreadyExistsError(EMAIL_TAKEN)


def list_users(db: Session, page: PageRequest) -> Envelope[UserResponse]:
    total = db.execute(select(func.count(User.id))).scalar() or 0
    users = db.execute(page.apply(select(User).order_by(User.id))).scalars().all()
    return page.envelope([UserResponse.model_validate(user) for user in users], total)


def get_user_details(db: Session, user_id: int, page: PageRequest) -> UserDetailsResponse:
    """A user with one page of their loan history, newest loan first."""
    user = get_user(db, user_id)

    total = db.execute(
        select(func.count(Loan.id)).where(Loan.user_id == user_id)
    ).scalar() or 0
    stmt = (
        select(Loan)
        .options(selectinload(Loan.book))
        .where(Loan.user_id == user_id)
        .order_by(Loan.loan_date.desc(), Loan.id.desc())
    )
    loans = db.execute(page.apply(stmt)).scalars().all()

    return UserDetailsResponse(
        **UserResponse.model_validate(user).model_dump(),
        loan_history=page.envelope(
            [UserLoanResponse.model_validate(loan) for loan in loans], total
        ).model_dump(),
    )


def create_user(db: Session, user_data: UserCreate) -> User:
    _ensure_email_free(db, user_data.email)

    user = User(**user_data.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User created: {user.id}")
    return user


def replace_user(db: Session, user_id: int, user_data: UserCreate) -> User:
    user = get_user(db, user_id)
    _ensure_email_free(db, user_data.email, user_id)

    for field, value in user_data.model_dump().items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    logger.info(f"User replaced: {user_id}")
    return user


def update_user(db: Session, user_id: int, user_data: UserUpdate) -> User:
    user = get_user(db, user_id)
    update_data = user_data.model_dump(exclude_unset=True)

    # name and email are required columns, address may be cleared
    for required in ("name", "email"):
        if update_data.get(required, "") is None:
            update_data.pop(required)

    if "email" in update_data:
        _ensure_email_free(db, update_data["email"], user_id)

    for field, value in update_data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    logger.info(f"User updated: {user_id} fields={sorted(update_data)}")
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {user_id}")
