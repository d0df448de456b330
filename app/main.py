"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup/shutdown logging

3. Middleware Stack
   - Rate limiting (slowapi)
   - CORS: Allow cross-origin requests

4. Exception Handlers
   - Service exceptions → their status code and {error} body
   - Request validation failures → 400 with {errors: [...]}
   - Database and unhandled errors → 500, details only in the log
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.dependencies import DbSession
from app.routers import books_router, reviews_router, search_router
from app.services.exceptions import (
    AuthenticationError,
    BooksAPIError,
    UnexpectedError,
)
from app.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}, debug: {settings.debug}")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


# =============================================================================
# Error Formatting
# =============================================================================
def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    """
    Flatten FastAPI validation errors into one entry per failing field.

    {"loc": ("body", "publishedYear"), "msg": "..."} becomes
    {"field": "publishedYear", "message": "...", "location": "body"}.
    """
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        location = str(loc[0]) if loc else "body"
        field = ".".join(str(part) for part in loc[1:]) or location
        errors.append({
            "field": field,
            "message": error.get("msg", "Invalid value"),
            "location": location,
        })
    return errors


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Reviews API

A REST API for a community book catalogue.

### Features
- **Books**: Add books, list them with author/genre filters, view details
- **Reviews**: One review per user per book, editable by its author
- **Ratings**: Each book's average rating is kept in sync with its reviews
- **Search**: Case-insensitive search over titles and authors

### Authentication
Write endpoints require `Authorization: Bearer <token>` with an access
token issued by the identity provider.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # The limiter must be attached to app.state for the decorators to find it
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(BooksAPIError)
    async def books_api_exception_handler(
        request: Request,
        exc: BooksAPIError,
    ) -> JSONResponse:
        """Map a service exception to its status code and safe message."""
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}

        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_content(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report every invalid body, query or path field with a 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": format_validation_errors(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        error = UnexpectedError()
        return JSONResponse(status_code=error.status_code, content=error.to_content())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            error = UnexpectedError(str(exc))
        else:
            error = UnexpectedError()

        return JSONResponse(status_code=error.status_code, content=error.to_content())

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(books_router)
    app.include_router(reviews_router)
    app.include_router(search_router)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API and its database are reachable.",
    )
    def health_check(db: DbSession) -> dict:
        """
        Health check endpoint.

        Used by load balancers and monitoring systems.
        """
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"Health check database error: {exc}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "ok" else "degraded",
            "app": settings.app_name,
            "version": settings.api_version,
            "database": database,
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# Run directly with: python -m app.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
