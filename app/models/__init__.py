"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (the user who added each book)
- User -> Review: One-to-Many
- Book -> Review: One-to-Many, at most one review per (book, user)

Import all models here to:
1. Make them available as: from app.models import Book, Review, User
2. Ensure Alembic discovers them for migrations
"""

from app.models.user import User
from app.models.book import Book
from app.models.review import Review

__all__ = [
    "User",
    "Book",
    "Review",
]
