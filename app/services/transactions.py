"""
Transaction Helper

Wraps a unit of work so that it is committed as a whole and database
failures surface as service exceptions instead of raw SQLAlchemy errors.

Usage:
    with write_transaction(db, conflict_message="ISBN already exists"):
        db.add(book)
        db.flush()
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.exceptions import ConflictError, UnexpectedError

logger = logging.getLogger(__name__)


@contextmanager
def write_transaction(db: Session, conflict_message: str) -> Iterator[None]:
    """
    Commit everything done inside the block, or roll all of it back.

    Raises:
        ConflictError: A unique constraint rejected the write
        UnexpectedError: Any other database failure
    """
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity error: {exc.orig}")
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Database error: {exc}", exc_info=True)
        raise UnexpectedError() from exc
