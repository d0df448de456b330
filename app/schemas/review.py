"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Submit a review (rating and comment both required)
- ReviewUpdate: Partial update, only the provided fields change
- ReviewResponse: Review with its author expanded to {id, username}

Business Rules:
- Rating must be an integer from 1 to 5
- Comment must be 10-1000 characters after trimming
- One review per user per book (enforced at database level)
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.schemas.common import CamelModel, reject_bool
from app.schemas.user import UserSummary

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10
MAX_COMMENT_LENGTH = 1000


class ReviewCreate(CamelModel):
    """
    Schema for submitting a review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read."
    }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int = Field(
        ...,
        ge=MIN_RATING,
        le=MAX_RATING,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        min_length=MIN_COMMENT_LENGTH,
        max_length=MAX_COMMENT_LENGTH,
        description="Review text",
        examples=["A sweeping story that rewards patient readers."],
    )

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_bool(cls, v: Any) -> Any:
        return reject_bool(v)


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional; omitted fields keep their current value.
    A field that is present must be valid, so an explicit null is rejected.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int | None = Field(
        default=None,
        ge=MIN_RATING,
        le=MAX_RATING,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        min_length=MIN_COMMENT_LENGTH,
        max_length=MAX_COMMENT_LENGTH,
        description="Review text",
    )

    @field_validator("rating", "comment", mode="before")
    @classmethod
    def reject_explicit_null(cls, v: Any) -> Any:
        # Only runs for fields present in the body
        if v is None:
            raise PydanticCustomError("null_not_allowed", "Field cannot be null")
        return v

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_bool(cls, v: Any) -> Any:
        return reject_bool(v)


class ReviewResponse(CamelModel):
    """
    Review as returned by every review-producing endpoint.

    book is the reviewed book's id; user is expanded to {id, username}.
    """

    id: int = Field(..., description="Unique review identifier")
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str
    book: int = Field(..., description="ID of the reviewed book")
    user: UserSummary = Field(..., description="User who wrote the review")
    created_at: datetime
    updated_at: datetime

    @field_validator("book", mode="before")
    @classmethod
    def book_reference_to_id(cls, v: Any) -> Any:
        """Collapse a loaded Book relationship to its id."""
        return getattr(v, "id", v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "rating": 5,
                "comment": "This book completely changed my perspective.",
                "book": 42,
                "user": {"id": 7, "username": "booklover"},
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


class ReviewMutationResponse(CamelModel):
    """Response of review submit and update endpoints."""

    message: str
    review: ReviewResponse
