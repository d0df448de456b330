"""
Shared Schema Building Blocks

- reject_bool: before-validator for integer fields
- CamelModel: base class for every API schema. Python code uses
  snake_case attribute names while JSON payloads use camelCase keys
  (publishedYear, averageRating, createdAt, ...).
- Pagination blocks: every paginated response carries the same
  currentPage/totalPages/hasNext/hasPrev block plus a total whose key
  depends on what is being counted.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


def reject_bool(v: Any) -> Any:
    """
    Refuse JSON booleans for integer fields.

    Lax int parsing would turn true into 1. Numbers and numeric strings
    pass through to the normal int validation.
    """
    if isinstance(v, bool):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return v


class CamelModel(BaseModel):
    """Base schema serializing field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationBase(CamelModel):
    """
    Pagination metadata.

    total_pages is ceil(total / limit), so an empty result has 0 pages,
    hasNext is false and hasPrev is true for any page after the first.
    """

    current_page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    has_next: bool = Field(..., description="Whether a later page exists")
    has_prev: bool = Field(..., description="Whether an earlier page exists")

    @staticmethod
    def page_fields(page: int, limit: int, total: int) -> dict:
        total_pages = math.ceil(total / limit)
        return {
            "current_page": page,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        }


class BookPagination(PaginationBase):
    total_books: int = Field(..., ge=0, description="Books matching the filters")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "BookPagination":
        return cls(total_books=total, **cls.page_fields(page, limit, total))


class ReviewPagination(PaginationBase):
    total_reviews: int = Field(..., ge=0, description="Reviews for the book")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "ReviewPagination":
        return cls(total_reviews=total, **cls.page_fields(page, limit, total))


class SearchPagination(PaginationBase):
    total_results: int = Field(..., ge=0, description="Books matching the query")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "SearchPagination":
        return cls(total_results=total, **cls.page_fields(page, limit, total))


class MessageResponse(CamelModel):
    """Response carrying only a confirmation message."""

    message: str
