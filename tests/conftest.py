"""
pytest Fixtures for Library Lending API Tests

FIXTURE SCOPES:
- session scope for the engine (created once)
- function scope for sessions (isolation between tests)

Each test runs inside a transaction that is rolled back afterwards, so
services can commit freely without leaking rows into other tests.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# Rate limiting off, and an in-memory database for the app's own engine
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"

from collections.abc import Callable, Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.database import Base, get_db
from library_api.main import app
from library_api.models import Book, Loan, Review, User

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps the suite fast and self-contained. The
# recommendation SQL is written to run on both SQLite and PostgreSQL.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the whole session;
    without it the in-memory database would vanish between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    The session joins an outer transaction that is rolled back after
    the test, so commits made by services never persist.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )

    connection = engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests use the test session."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# FACTORY FIXTURES
# =============================================================================
# Factories let a test build exactly the rows it needs:
#     book = make_book("Dune")
#     make_loan(user, book, date(2024, 1, 1))


@pytest.fixture
def make_book(db_session: Session) -> Callable[..., Book]:
    counter = {"n": 0}

    def _make(
        title: str = "Untitled",
        author: str = "Anonymous",
        publish_date: date = date(2000, 1, 1),
        isbn: str | None = None,
    ) -> Book:
        counter["n"] += 1
        book = Book(
            title=title,
            author=author,
            publish_date=publish_date,
            isbn=isbn or f"978000000{counter['n']:04d}",
        )
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(name: str = "Reader", email: str | None = None, address: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"reader{counter['n']}@example.com",
            address=address,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_loan(db_session: Session) -> Callable[..., Loan]:
    def _make(user: User, book: Book, loan_date: date, return_date: date | None = None) -> Loan:
        loan = Loan(
            user_id=user.id,
            book_id=book.id,
            loan_date=loan_date,
            return_date=return_date,
        )
        db_session.add(loan)
        db_session.commit()
        db_session.refresh(loan)
        return loan

    return _make


@pytest.fixture
def make_review(db_session: Session) -> Callable[..., Review]:
    def _make(user: User, book: Book, rating: int) -> Review:
        review = Review(user_id=user.id, book_id=book.id, rating=rating)
        db_session.add(review)
        db_session.commit()
        db_session.refresh(review)
        return review

    return _make


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_book(make_book) -> Book:
    return make_book(
        title="1984",
        author="George Orwell",
        publish_date=date(1949, 6, 8),
        isbn="9780451524935",
    )


@pytest.fixture
def sample_user(make_user) -> User:
    return make_user(
        name="Jane Doe",
        email="jane@example.com",
        address="12 Library Lane",
    )


@pytest.fixture
def sample_loan(make_loan, sample_user: User, sample_book: Book) -> Loan:
    """An active loan of sample_book to sample_user."""
    return make_loan(sample_user, sample_book, date(2024, 5, 1))


@pytest.fixture
def sample_review(make_review, sample_user: User, sample_book: Book) -> Review:
    return make_review(sample_user, sample_book, 4)


@pytest.fixture
def book_data() -> dict:
    """Valid request body for creating a book."""
    return {
        "title": "Brave New World",
        "author": "Aldous Huxley",
        "publish_date": "1932-01-01",
        "isbn": "978-0060850524",
    }


@pytest.fixture
def user_data() -> dict:
    """Valid request body for registering a user."""
    return {
        "name": "John Smith",
        "address": "1 Main Street",
        "email": "john@example.com",
    }
