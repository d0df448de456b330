"""
Book Service

Business logic for adding, listing and fetching books.

Routers stay thin: they parse the request, call one of these functions
and shape the result with the response schemas.
"""

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from app.models import Book, Review, User
from app.schemas.book import BookCreate
from app.services.exceptions import ConflictError, NotFoundError
from app.services.transactions import write_transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists"


@dataclass
class Page(Generic[T]):
    """One page of query results plus the total row count."""

    items: list[T]
    total: int
    page: int
    limit: int


@dataclass
class BookDetail:
    """A book together with one page of its reviews."""

    book: Book
    reviews: Page[Review]


# =============================================================================
# Query Helpers
# =============================================================================
def contains_ignore_case(column, term: str):
    """
    Case-insensitive substring match.

    The term is matched literally: LIKE wildcards (% and _) typed by the
    caller are escaped.
    """
    return func.lower(column).contains(term.lower(), autoescape=True)


def paginate(db: Session, stmt: Select, page: int, limit: int, *order_by) -> Page:
    """
    Run a select statement for one page.

    Counts the unpaginated rows first, then fetches the requested slice in
    the given order. A page past the last one is empty without querying.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = db.execute(count_stmt).scalar() or 0

    offset = (page - 1) * limit
    if offset >= total:
        return Page(items=[], total=total, page=page, limit=limit)

    page_stmt = (
        stmt
        .order_by(*order_by)
        .offset(offset)
        .limit(limit)
    )
    items = list(db.execute(page_stmt).scalars().all())

    return Page(items=items, total=total, page=page, limit=limit)


def newest_books_first() -> tuple:
    # id breaks ties between books created within the same clock tick
    return Book.created_at.desc(), Book.id.desc()


def get_book(db: Session, book_id: int) -> Book:
    """
    Get a book by ID with addedBy loaded.

    Raises:
        NotFoundError: If the book does not exist
    """
    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(Book.id == book_id)
    )
    book = db.execute(stmt).scalar_one_or_none()

    if book is None:
        raise NotFoundError("Book not found")

    return book


# =============================================================================
# Operations
# =============================================================================
def add_book(db: Session, book_data: BookCreate, acting_user: User) -> Book:
    """
    Add a new book on behalf of the acting user.

    Field validation happened in BookCreate; the new book starts with an
    average rating of 0 and no reviews.

    Args:
        db: Database session
        book_data: Validated book fields
        acting_user: Authenticated user, recorded as addedBy

    Returns:
        The created book with addedBy loaded

    Raises:
        ConflictError: If the ISBN is already taken
    """
    if book_data.isbn is not None:
        existing = db.execute(
            select(Book.id).where(Book.isbn == book_data.isbn)
        ).scalar_one_or_none()
        if existing is not None:
            logger.warning(f"Duplicate ISBN rejected: {book_data.isbn}")
            raise ConflictError(DUPLICATE_ISBN_MESSAGE)

    book = Book(
        **book_data.model_dump(),
        average_rating=0,
        total_reviews=0,
        added_by_id=acting_user.id,
    )

    # The unique index still guards against a concurrent insert
    with write_transaction(db, conflict_message=DUPLICATE_ISBN_MESSAGE):
        db.add(book)

    logger.info(f"Book {book.id} added by user {acting_user.id}: '{book.title}'")

    return get_book(db, book.id)


def list_books(
    db: Session,
    page: int,
    limit: int,
    author: str | None = None,
    genre: str | None = None,
) -> Page[Book]:
    """
    List books newest first, optionally filtered.

    Args:
        db: Database session
        page: Page number (1-indexed)
        limit: Books per page
        author: Case-insensitive substring of the author name
        genre: Case-insensitive substring of the genre

    Returns:
        One page of books with addedBy loaded
    """
    stmt = select(Book).options(selectinload(Book.added_by))

    # Both filters are optional; when both are given a book must match both
    if author:
        stmt = stmt.where(contains_ignore_case(Book.author, author))
    if genre:
        stmt = stmt.where(contains_ignore_case(Book.genre, genre))

    return paginate(db, stmt, page, limit, *newest_books_first())


def get_book_detail(db: Session, book_id: int, page: int, limit: int) -> BookDetail:
    """
    Get a book and one page of its reviews, newest first.

    Raises:
        NotFoundError: If the book does not exist
    """
    book = get_book(db, book_id)

    reviews_stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.book_id == book.id)
    )
    reviews = paginate(
        db,
        reviews_stmt,
        page,
        limit,
        Review.created_at.desc(),
        Review.id.desc(),
    )

    return BookDetail(book=book, reviews=reviews)
