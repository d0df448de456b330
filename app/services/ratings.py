"""
Ratings Service

Maintains the denormalized rating fields on the Book model:
- average_rating: The mean of all review ratings, one decimal place
- total_reviews: Total number of reviews

The fields are recomputed from the full set of reviews after every review
create/update/delete. They are never adjusted incrementally, so a single
recomputation always repairs any earlier drift.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import Book, Review

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def round_rating(total: int, count: int) -> float:
    """
    Mean of the ratings rounded to one decimal, halves rounded up.

    Computed from the integer sum so that 9/4 gives 2.3 rather than the
    2.2 that round(2.25, 1) would produce.
    """
    if count == 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def recalculate_book_rating(db: Session, book_id: int) -> Book | None:
    """
    Recalculate a book's rating aggregations.

    Called by the review service after any review create/update/delete.
    The pending review change must already be flushed so the aggregate
    query sees it.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        The updated book, or None if it no longer exists

    Note:
        This function does not commit. The caller commits the review
        mutation and the new aggregates in the same transaction.
    """
    stmt = select(
        func.coalesce(func.sum(Review.rating), 0),
        func.count(Review.id),
    ).where(Review.book_id == book_id)

    total, count = db.execute(stmt).one()

    book = db.get(Book, book_id)
    if book is None:
        logger.warning(f"Rating recalculation skipped: book {book_id} not found")
        return None

    book.average_rating = round_rating(int(total), count)
    book.total_reviews = count
    db.flush()

    logger.debug(
        f"Book {book_id} rating recalculated: "
        f"average={book.average_rating} reviews={book.total_reviews}"
    )
    return book


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books.

    Useful for data migrations or fixing inconsistencies.

    Args:
        db: Database session

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    for book_id in book_ids:
        recalculate_book_rating(db, book_id)

    db.commit()
    logger.info(f"Recalculated ratings for {len(book_ids)} books")

    return len(book_ids)
