"""
Rate Limiting Service

Per-client request limits built on slowapi.

Counters live in process memory, so each API instance limits on its own
and the counts reset on restart. Clients are identified by IP address,
taking the first hop of X-Forwarded-For when the API sits behind a proxy.

Limit Tiers (see Settings):
- rate_limit_default: list and detail reads
- rate_limit_search: GET /search
- rate_limit_write: adding books and any review change

Set RATE_LIMIT_ENABLED=false to switch limiting off (the test suite does).
"""

import logging

from fastapi import Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def get_client_ip(request: Request) -> str:
    """Key function: the caller's IP, proxy headers first."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Build the application's limiter from settings."""
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri="memory://",
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    if settings.rate_limit_enabled:
        logger.info(
            f"Rate limiting on: reads {settings.rate_limit_default}, "
            f"search {settings.rate_limit_search}, writes {settings.rate_limit_write}"
        )
    else:
        logger.info("Rate limiting disabled")

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Answer a throttled request with 429.

    The body uses the same {"error": ...} shape as every other failure and
    Retry-After holds the length of the exceeded window in seconds.
    """
    retry_after = exc.limit.limit.get_expiry()

    logger.warning(
        f"Rate limit {exc.detail} exceeded by {get_client_ip(request)} "
        f"on {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": f"Too many requests. Limit: {exc.detail}"},
        headers={"Retry-After": str(retry_after)},
    )
