"""
Search Pydantic Schemas
"""

from pydantic import Field

from app.schemas.book import BookResponse
from app.schemas.common import CamelModel, SearchPagination


class SearchResponse(CamelModel):
    """Response of GET /search."""

    query: str = Field(..., description="The search text, trimmed")
    books: list[BookResponse]
    pagination: SearchPagination
