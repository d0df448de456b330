"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: Different rules for create vs update vs response
3. Decoupling: Database schema can evolve independently of API
4. Wire format: Python attributes are snake_case, JSON keys are camelCase

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating (all optional)
- XxxResponse: Fields returned in API responses
"""

from app.schemas.common import (
    BookPagination,
    CamelModel,
    MessageResponse,
    ReviewPagination,
    SearchPagination,
)
from app.schemas.user import UserContact, UserSummary
from app.schemas.review import (
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.book import (
    BookCreate,
    BookCreatedResponse,
    BookDetailResponse,
    BookListResponse,
    BookResponse,
)
from app.schemas.search import SearchResponse

__all__ = [
    # Shared
    "CamelModel",
    "MessageResponse",
    "BookPagination",
    "ReviewPagination",
    "SearchPagination",
    # User snapshots
    "UserSummary",
    "UserContact",
    # Book schemas
    "BookCreate",
    "BookResponse",
    "BookCreatedResponse",
    "BookListResponse",
    "BookDetailResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewMutationResponse",
    # Search schemas
    "SearchResponse",
]
