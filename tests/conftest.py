"""
pytest Fixtures for Book Reviews API Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES USED HERE:
- function (default): every test gets its own in-memory database,
  session, client and sample data

Each test builds the schema from scratch on a fresh SQLite engine. The
services commit their own transactions, so rolling back an outer
transaction would not undo their work; throwing the whole database away
does.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting and sets a test secret key
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Book, Review, User
from app.services.ratings import recalculate_book_rating


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps a single connection alive for the engine's lifetime.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    The get_db dependency is overridden so that requests and fixtures share
    one session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(username="testuser", email="testuser@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    user = User(username="seconduser", email="seconduser@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def book_factory(db_session: Session, sample_user: User):
    """
    Return a function that inserts a book directly, bypassing the API.

    Any Book column can be overridden by keyword.
    """

    def make_book(**overrides) -> Book:
        fields = {
            "title": "Dune",
            "author": "Frank Herbert",
            "genre": "Science Fiction",
            "description": "A noble family takes control of the desert planet Arrakis.",
            "published_year": 1965,
            "isbn": None,
            "added_by_id": sample_user.id,
        }
        fields.update(overrides)
        book = Book(**fields)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return make_book


@pytest.fixture
def sample_book(book_factory) -> Book:
    """Create a sample book added by sample_user."""
    return book_factory(
        title="1984",
        author="George Orwell",
        genre="Dystopian",
        description="A dystopian novel set in a totalitarian society.",
        published_year=1949,
        isbn="978-0451524935",
    )


@pytest.fixture
def multiple_books(db_session: Session, sample_user: User) -> list[Book]:
    """
    Create 25 books for pagination testing.

    Even-numbered books are Science Fiction by Frank Herbert, odd-numbered
    ones are Fantasy by Ursula Le Guin.
    """
    books = []
    for i in range(25):
        if i % 2 == 0:
            author, genre = "Frank Herbert", "Science Fiction"
        else:
            author, genre = "Ursula Le Guin", "Fantasy"
        book = Book(
            title=f"Test Book {i + 1}",
            author=author,
            genre=genre,
            description=f"Description for book {i + 1}",
            published_year=1950 + i,
            added_by_id=sample_user.id,
        )
        books.append(book)
        db_session.add(book)
        # One flush per book so created_at follows insertion order
        db_session.flush()

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(
    db_session: Session,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """Create a sample review with the book's rating kept in sync."""
    review = Review(
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
    db_session.add(review)
    db_session.flush()
    recalculate_book_rating(db_session, sample_book.id)
    db_session.commit()
    db_session.refresh(review)
    return review
