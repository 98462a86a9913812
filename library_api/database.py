"""
Database Configuration Module

Sets up SQLAlchemy 2.0 for the Library Lending API.

We use SYNCHRONOUS SQLAlchemy: every query the API issues is a short
read or a single-row write, so a blocking session per request keeps the
code simple and easy to reason about.

Session Management Pattern
==========================
"Session per request":
1. Request arrives -> create a new session
2. Use that session for every database operation in the request
3. Services commit their own writes
4. Close the session when the request ends

This is implemented with FastAPI's dependency injection (get_db).
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# PostgreSQL gets a sized connection pool. SQLite (local runs) cannot share
# a connection across threads by default and ignores pool sizing, so it gets
# check_same_thread=False instead.

def _engine_options() -> dict[str, Any]:
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections are alive before using
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL in debug mode
    **_engine_options(),
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the route uses it, and the
    finally block closes it even if the route raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: DbSession):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Handy for local development and tests; it does not track schema
    changes.
    """
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables. Deletes all data."""
    Base.metadata.drop_all(bind=engine)
