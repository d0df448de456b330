"""
Books Router

Endpoints:
- POST /books - Add a book (authenticated)
- GET /books - List books with pagination and author/genre filters
- GET /books/{book_id} - Book details with a page of its reviews

Books cannot be edited or deleted through the API.
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import ActingUser, BookFilters, DbSession, Pagination
from app.schemas import (
    BookCreate,
    BookCreatedResponse,
    BookDetailResponse,
    BookListResponse,
    BookPagination,
    BookResponse,
    ReviewPagination,
    ReviewResponse,
)
from app.schemas.book import BookCreatedBook
from app.services import books as book_service
from app.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "",
    response_model=BookCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a new book",
    description="Add a book to the catalogue. Requires authentication.",
)
@limiter.limit(settings.rate_limit_write)
def add_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: ActingUser,
) -> BookCreatedResponse:
    """
    Add a new book.

    The authenticated user is recorded as addedBy and returned expanded
    with username and email.

    Raises:
        400: Validation errors, or ISBN already used by another book
        401: Missing or invalid bearer token
    """
    book = book_service.add_book(db, book_data, current_user)

    return BookCreatedResponse(
        message="Book added successfully",
        book=BookCreatedBook.model_validate(book),
    )


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books",
    description="Get a paginated list of books, newest first, optionally filtered by author and genre.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: BookFilters,
) -> BookListResponse:
    """
    List books with pagination and optional filtering.

    Examples:
        GET /books?page=2&limit=20
        GET /books?author=herbert&genre=science
    """
    page = book_service.list_books(
        db,
        page=pagination.page,
        limit=pagination.limit,
        author=filters.author,
        genre=filters.genre,
    )

    return BookListResponse(
        books=[BookResponse.model_validate(book) for book in page.items],
        pagination=BookPagination.build(page.page, page.limit, page.total),
    )


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    summary="Get book details",
    description="Retrieve a book with a paginated list of its reviews, newest first.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_detail(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
) -> BookDetailResponse:
    """
    Get a single book by its ID, with one page of reviews.

    Raises:
        404: If the book does not exist
    """
    detail = book_service.get_book_detail(
        db, book_id, page=pagination.page, limit=pagination.limit
    )
    reviews = detail.reviews

    return BookDetailResponse(
        book=BookResponse.model_validate(detail.book),
        reviews=[ReviewResponse.model_validate(review) for review in reviews.items],
        pagination=ReviewPagination.build(reviews.page, reviews.limit, reviews.total),
    )
