"""
Review Service

Business logic for submitting, updating and deleting reviews.

Business Rules:
- One review per user per book (checked here, enforced by the
  uq_review_book_user constraint)
- Only the review author can update or delete a review
- Every mutation recomputes the book's rating aggregates before the
  transaction is committed, so the review and the aggregates change together
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models import Review, User
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services.books import get_book
from app.services.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from app.services.ratings import recalculate_book_rating
from app.services.transactions import write_transaction

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book"


def get_review(db: Session, review_id: int) -> Review:
    """
    Get a review by ID with its author loaded.

    Raises:
        NotFoundError: If the review does not exist
    """
    stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFoundError("Review not found")
    return review


def _get_owned_review(db: Session, review_id: int, acting_user: User, action: str) -> Review:
    review = get_review(db, review_id)

    if review.user_id != acting_user.id:
        logger.warning(
            f"User {acting_user.id} attempted to {action} review {review_id} "
            f"owned by user {review.user_id}"
        )
        raise AuthorizationError(f"You can only {action} your own reviews")

    return review


def submit_review(
    db: Session,
    book_id: int,
    review_data: ReviewCreate,
    acting_user: User,
) -> Review:
    """
    Create a review for a book.

    Args:
        db: Database session
        book_id: ID of the book to review
        review_data: Validated rating and comment
        acting_user: Authenticated user writing the review

    Returns:
        The created review with its author loaded

    Raises:
        NotFoundError: If the book does not exist
        ConflictError: If the user already reviewed this book
    """
    book = get_book(db, book_id)

    existing = db.execute(
        select(Review.id).where(
            Review.book_id == book.id,
            Review.user_id == acting_user.id,
        )
    ).scalar_one_or_none()

    if existing is not None:
        logger.warning(f"User {acting_user.id} already reviewed book {book.id}")
        raise ConflictError(DUPLICATE_REVIEW_MESSAGE)

    review = Review(
        book_id=book.id,
        user_id=acting_user.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )

    # A concurrent submission that passed the check above fails on flush
    with write_transaction(db, conflict_message=DUPLICATE_REVIEW_MESSAGE):
        db.add(review)
        db.flush()
        recalculate_book_rating(db, book.id)

    logger.info(
        f"Review {review.id} submitted for book {book_id} by user {acting_user.id}"
    )

    return get_review(db, review.id)


def update_review(
    db: Session,
    review_id: int,
    changes: ReviewUpdate,
    acting_user: User,
) -> Review:
    """
    Partially update a review.

    Only the fields present in the request body are changed.

    Raises:
        NotFoundError: If the review does not exist
        AuthorizationError: If the acting user is not the author
    """
    review = _get_owned_review(db, review_id, acting_user, action="update")

    update_data = changes.model_dump(exclude_unset=True)

    with write_transaction(db, conflict_message="Review could not be updated"):
        for field, value in update_data.items():
            setattr(review, field, value)
        db.flush()
        recalculate_book_rating(db, review.book_id)

    logger.info(
        f"Review {review_id} updated by user {acting_user.id}: "
        f"{sorted(update_data) or 'no changes'}"
    )

    return get_review(db, review_id)


def delete_review(db: Session, review_id: int, acting_user: User) -> None:
    """
    Delete a review and recompute the book's rating.

    Raises:
        NotFoundError: If the review does not exist
        AuthorizationError: If the acting user is not the author
    """
    review = _get_owned_review(db, review_id, acting_user, action="delete")
    book_id = review.book_id

    with write_transaction(db, conflict_message="Review could not be deleted"):
        db.delete(review)
        db.flush()
        recalculate_book_rating(db, book_id)

    logger.info(f"Review {review_id} deleted by user {acting_user.id}")
