#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample users, books and reviews for local
development, and prints a bearer token for each seeded user.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py
    python scripts/seed_data.py --keep   # Don't clear existing data

Reviews go through the review service, so every seeded book ends up with
correct averageRating and totalReviews values.
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Book, Review, User
from app.schemas import BookCreate, ReviewCreate
from app.services.books import add_book
from app.services.reviews import submit_review
from app.services.security import create_access_token


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create sample users as the identity provider would have registered them."""
    print("Creating users...")
    users_data = [
        {"username": "alice", "email": "alice@example.com"},
        {"username": "bob", "email": "bob@example.com"},
        {"username": "carol", "email": "carol@example.com"},
    ]

    users = {}
    for data in users_data:
        user = User(**data)
        db.add(user)
        users[data["username"]] = user

    db.commit()
    for user in users.values():
        db.refresh(user)

    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, users: dict[str, User]) -> list[Book]:
    """Create sample books."""
    print("Creating books...")
    books_data = [
        {
            "title": "Dune",
            "author": "Frank Herbert",
            "genre": "Science Fiction",
            "description": "On the desert planet Arrakis, Paul Atreides is drawn "
                           "into a struggle over the most valuable substance in the universe.",
            "publishedYear": 1965,
            "isbn": "978-0441172719",
            "added_by": "alice",
        },
        {
            "title": "1984",
            "author": "George Orwell",
            "genre": "Dystopian",
            "description": "A dystopian novel set in a totalitarian society "
                           "under constant surveillance.",
            "publishedYear": 1949,
            "isbn": "978-0451524935",
            "added_by": "alice",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "genre": "Romance",
            "description": "The turbulent relationship between Elizabeth Bennet "
                           "and Fitzwilliam Darcy.",
            "publishedYear": 1813,
            "added_by": "bob",
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "genre": "Fantasy",
            "description": "Bilbo Baggins is swept into a quest to reclaim "
                           "a dwarven kingdom from a dragon.",
            "publishedYear": 1937,
            "isbn": "978-0547928227",
            "added_by": "carol",
        },
        {
            "title": "Foundation",
            "author": "Isaac Asimov",
            "genre": "Science Fiction",
            "description": "A mathematician predicts the fall of the Galactic "
                           "Empire and plans to shorten the dark age that follows.",
            "publishedYear": 1951,
            "added_by": "bob",
        },
    ]

    books = []
    for data in books_data:
        added_by = users[data.pop("added_by")]
        books.append(add_book(db, BookCreate(**data), added_by))

    print(f"Created {len(books)} books.")
    return books


def create_reviews(db: Session, users: dict[str, User], books: list[Book]) -> int:
    """Create sample reviews; each one updates its book's rating."""
    print("Creating reviews...")
    reviews_data = [
        ("Dune", "alice", 5, "A towering achievement in world building."),
        ("Dune", "bob", 4, "Dense at first but absolutely worth the effort."),
        ("Dune", "carol", 3, "Great ideas, slow pacing in the middle section."),
        ("1984", "bob", 5, "Chilling and more relevant every year."),
        ("1984", "carol", 4, "Bleak, sharp and impossible to forget."),
        ("The Hobbit", "alice", 5, "A warm and funny adventure for every age."),
        ("Foundation", "carol", 2, "Fascinating premise, but the characters felt thin."),
    ]

    books_by_title = {book.title: book for book in books}
    for title, username, rating, comment in reviews_data:
        submit_review(
            db,
            books_by_title[title].id,
            ReviewCreate(rating=rating, comment=comment),
            users[username],
        )

    print(f"Created {len(reviews_data)} reviews.")
    return len(reviews_data)


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db, users)
        review_count = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {review_count}")
        print("\nBearer tokens (valid for 60 minutes):")
        for username, user in users.items():
            print(f"  {username}: {create_access_token({'sub': str(user.id)})}")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Book Reviews database")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing data instead of clearing it first",
    )
    args = parser.parse_args()

    seed_database(clear_existing=not args.keep)
