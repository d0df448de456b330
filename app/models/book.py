"""
Book Model

The central model of the Book Reviews API.

average_rating and total_reviews are denormalized from the reviews table.
They are never written by API callers; app.services.ratings recomputes
them after every review mutation.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review
    from app.models.user import User


class Book(Base):
    """
    Book model representing books in the catalogue.

    Table: books

    Fields:
    - title, author, genre, description: Required text fields
    - published_year: Year of first publication
    - isbn: Optional, unique when present
    - average_rating / total_reviews: Derived from reviews
    - added_by_id: User who created the record (never changes)

    Indexes:
    - isbn: Unique index (NULLs allowed, several books may lack an ISBN)
    - title, author: For search and filtering
    - created_at: For newest-first listing

    Example:
        book = Book(
            title="Dune",
            author="Frank Herbert",
            genre="Science Fiction",
            description="A desert planet, a noble family...",
            published_year=1965,
            added_by_id=user.id,
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Author name as displayed"
    )

    genre: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
        comment="Free-text genre label"
    )

    description: Mapped[str] = mapped_column(
        String(2000),
        nullable=False,
        comment="Book description or summary"
    )

    published_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of publication"
    )

    # Optional because older books might not have one
    isbn: Mapped[str | None] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=True,
        comment="International Standard Book Number"
    )

    # -------------------------------------------------------------------------
    # Derived Rating Fields
    # -------------------------------------------------------------------------
    average_rating: Mapped[float] = mapped_column(
        Float,
        default=0,
        server_default="0",
        nullable=False,
        comment="Mean review rating rounded to one decimal, 0 if no reviews"
    )

    total_reviews: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of reviews for this book"
    )

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------
    added_by_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="User who added the book"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    # Set in Python rather than by the server so that rows created in the
    # same second still sort in insertion order
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    added_by: Mapped["User"] = relationship("User", back_populates="books")

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_book_average_rating_range",
        ),
        CheckConstraint("total_reviews >= 0", name="ck_book_total_reviews"),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
