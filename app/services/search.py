"""
Search Service

Finds books whose title or author contains the query text, ignoring case.

The query is matched as a literal substring anywhere in either field, so
"dune" finds "Dune II" as well as books by "Duneworth".
"""

import logging
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from app.models import Book
from app.services.books import Page, contains_ignore_case, newest_books_first, paginate
from app.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    query: str
    books: Page[Book]


def search_books(db: Session, query: str | None, page: int, limit: int) -> SearchResult:
    """
    Search books by title or author.

    Args:
        db: Database session
        query: Search text; surrounding whitespace is ignored
        page: Page number (1-indexed)
        limit: Books per page

    Returns:
        The trimmed query and one page of matching books, newest first

    Raises:
        ValidationError: If the query is missing or blank
    """
    query = (query or "").strip()
    if not query:
        raise ValidationError.single("q", "Search query is required", location="query")

    stmt = (
        select(Book)
        .options(selectinload(Book.added_by))
        .where(
            or_(
                contains_ignore_case(Book.title, query),
                contains_ignore_case(Book.author, query),
            )
        )
    )
    books = paginate(db, stmt, page, limit, *newest_books_first())

    logger.debug(f"Search '{query}' matched {books.total} books")

    return SearchResult(query=query, books=books)
