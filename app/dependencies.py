"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: per-request database session
- Pagination: page/limit query parameters
- BookFilters: optional author/genre filters for the book list
- ActingUser: the user behind the request's bearer token
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models import User
from app.services.exceptions import AuthenticationError
from app.services.security import verify_access_token

settings = get_settings()

# OFFSET is bound as a signed 64-bit integer, so (page - 1) * limit must fit
MAX_PAGE = (2**63 - 1) // settings.max_page_size

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - limit: How many items per page (1 to max_page_size)

    Out-of-range values are rejected with a 400 validation error.

    Usage in route:
        @router.get("/books")
        def list_books(db: DbSession, pagination: Pagination):
            ...
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            le=MAX_PAGE,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description=f"Number of items per page (max {settings.max_page_size})",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.limit = limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Book List Filters
# =============================================================================
class BookFilterParams:
    """
    Optional filters for GET /books.

    Both are case-insensitive substring matches; blank values are ignored.

    Usage:
        GET /books?author=herbert&genre=fiction
    """

    def __init__(
        self,
        author: str | None = Query(
            default=None,
            max_length=100,
            description="Filter by author name (partial match, case-insensitive)",
            examples=["herbert"],
        ),
        genre: str | None = Query(
            default=None,
            max_length=50,
            description="Filter by genre (partial match, case-insensitive)",
            examples=["fiction"],
        ),
    ) -> None:
        self.author = author.strip() if author and author.strip() else None
        self.genre = genre.strip() if genre and genre.strip() else None


BookFilters = Annotated[BookFilterParams, Depends()]


# =============================================================================
# Bearer Authentication
# =============================================================================
# HTTPBearer extracts the token from "Authorization: Bearer <token>" and
# adds the "Authorize" button to Swagger UI. auto_error is off so that a
# missing header produces the same error body as an invalid token.

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer credential into the acting user.

    The identity provider vouches for the token; this dependency only
    verifies the signature and looks the user up.

    Raises:
        AuthenticationError: 401 if the token is missing, invalid, or
            names an unknown user
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    user_id = verify_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Invalid or expired token")

    return user


ActingUser = Annotated[User, Depends(get_current_user)]
