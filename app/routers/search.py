"""
Search Router

GET /search?q=...&page=...&limit=...

Case-insensitive substring search over book titles and authors.
"""

from fastapi import APIRouter, Query, Request

from app.config import get_settings
from app.dependencies import DbSession, Pagination
from app.schemas import BookResponse, SearchPagination, SearchResponse
from app.services.rate_limiter import limiter
from app.services.search import search_books

settings = get_settings()

router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search books",
    description="Find books whose title or author contains the query, ignoring case.",
)
@limiter.limit(settings.rate_limit_search)
def search(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    q: str | None = Query(
        default=None,
        max_length=200,
        description="Text to look for in titles and authors",
        examples=["dune", "herbert"],
    ),
) -> SearchResponse:
    """
    Search books by title or author.

    Examples:
        GET /search?q=dune
        GET /search?q=tolkien&page=2&limit=5

    Raises:
        400: If q is missing or blank
    """
    result = search_books(db, q, page=pagination.page, limit=pagination.limit)
    books = result.books

    return SearchResponse(
        query=result.query,
        books=[BookResponse.model_validate(book) for book in books.items],
        pagination=SearchPagination.build(books.page, books.limit, books.total),
    )
