"""
API Routers Package

Router Structure:
- books.py: /books endpoints
- reviews.py: /books/{id}/reviews and /reviews/{id} endpoints
- search.py: /search endpoint

Each router is imported and registered in main.py.
"""

from app.routers.books import router as books_router
from app.routers.reviews import router as reviews_router
from app.routers.search import router as search_router

__all__ = [
    "books_router",
    "reviews_router",
    "search_router",
]
