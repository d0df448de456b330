"""
Book Pydantic Schemas

Handles:
- Field length limits and whitespace trimming
- Publication year range (1000 up to the current year)
- ISBN format validation
- Response shapes for list, detail and create endpoints
"""

import re
from datetime import UTC, datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.common import (
    BookPagination,
    CamelModel,
    ReviewPagination,
    reject_bool,
)
from app.schemas.review import ReviewResponse
from app.schemas.user import UserContact, UserSummary

# 10 or 13 ASCII digits, hyphens allowed anywhere, no checksum verification
ISBN_PATTERN = re.compile(r"^(?=(?:[^0-9]*[0-9]){10}(?:(?:[^0-9]*[0-9]){3})?$)[0-9-]+$")

# Room for an ISBN-13 with a hyphen between every digit (25 characters)
MAX_ISBN_LENGTH = 50

MIN_PUBLISHED_YEAR = 1000


class BookCreate(CamelModel):
    """
    Schema for adding a new book.

    Derived fields (averageRating, totalReviews) and addedBy are not
    accepted from the caller; unknown keys in the body are ignored.

    Example request body:
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "description": "Set on the desert planet Arrakis...",
        "publishedYear": 1965,
        "isbn": "978-0441172719"
    }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Book title",
        examples=["Dune"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Author name",
        examples=["Frank Herbert"],
    )

    genre: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Genre label",
        examples=["Science Fiction"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Book description or summary",
    )

    published_year: int = Field(
        ...,
        ge=MIN_PUBLISHED_YEAR,
        description="Year of publication, not in the future",
        examples=[1965],
    )

    isbn: str | None = Field(
        default=None,
        max_length=MAX_ISBN_LENGTH,
        description="ISBN-10 or ISBN-13, hyphens allowed",
        examples=["978-0441172719"],
    )

    @field_validator("published_year", mode="before")
    @classmethod
    def published_year_not_bool(cls, v: Any) -> Any:
        return reject_bool(v)

    @field_validator("published_year")
    @classmethod
    def published_year_not_in_future(cls, v: int) -> int:
        """Reject years after the current calendar year."""
        current_year = datetime.now(UTC).year
        if v > current_year:
            raise PydanticCustomError(
                "published_year_future",
                "Published year cannot be later than {current_year}",
                {"current_year": current_year},
            )
        return v

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str | None) -> str | None:
        """
        Validate ISBN format.

        Accepts 10 or 13 digits with optional hyphens. The value is
        stored as given so that it round-trips unchanged.
        """
        if v is None:
            return v
        if not ISBN_PATTERN.match(v):
            raise PydanticCustomError("isbn_format", "Invalid ISBN format")
        return v


class BookResponse(CamelModel):
    """
    Book as returned by list, detail and search endpoints.

    addedBy is expanded to {id, username}.
    """

    id: int = Field(..., description="Unique book identifier")
    title: str
    author: str
    genre: str
    description: str
    published_year: int
    isbn: str | None = None
    average_rating: float = Field(..., ge=0, le=5, description="Mean rating, 0 without reviews")
    total_reviews: int = Field(..., ge=0, description="Number of reviews")
    added_by: UserSummary = Field(..., description="User who added the book")
    created_at: datetime
    updated_at: datetime


class BookCreatedBook(BookResponse):
    """Book returned right after creation; addedBy also carries the email."""

    added_by: UserContact = Field(..., description="User who added the book")


class BookCreatedResponse(CamelModel):
    """Response of POST /books."""

    message: str
    book: BookCreatedBook


class BookListResponse(CamelModel):
    """Response of GET /books."""

    books: list[BookResponse]
    pagination: BookPagination

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "books": [],
                "pagination": {
                    "currentPage": 1,
                    "totalPages": 3,
                    "totalBooks": 25,
                    "hasNext": True,
                    "hasPrev": False,
                },
            }
        },
    )


class BookDetailResponse(CamelModel):
    """Response of GET /books/{id}: the book plus one page of its reviews."""

    book: BookResponse
    reviews: list[ReviewResponse]
    pagination: ReviewPagination
