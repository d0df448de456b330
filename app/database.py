"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Book Reviews API.

We're using SYNCHRONOUS SQLAlchemy: FastAPI runs sync route handlers in
its thread pool, and a thin CRUD API gains little from async drivers.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

This is implemented using FastAPI's dependency injection.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# - pool_size / max_overflow: only meaningful for server databases
# - pool_pre_ping: Test connection health before using
# - echo: Log all SQL statements in debug mode

engine_options: dict = {
    "pool_pre_ping": True,
    "echo": settings.debug,
}

if settings.is_sqlite:
    # SQLite connections are bound to the creating thread by default,
    # but FastAPI serves sync routes from a thread pool
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    engine_options["pool_size"] = settings.db_pool_size
    engine_options["max_overflow"] = settings.db_max_overflow

engine = create_engine(settings.database_url, **engine_options)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: Services decide when to commit
# - autoflush=False: Don't auto-flush before queries (more predictable behavior)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, code after yield closes it,
    even if the route raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Useful for local development and the seed script.
    In production, use Alembic migrations instead.
    """
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Development and tests only.
    """
    Base.metadata.drop_all(bind=engine)
