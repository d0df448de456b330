"""
Security Service

Bearer token handling for the external identity provider.

The identity provider signs access tokens with the shared secret_key.
This API only verifies them; create_access_token exists so the seed
script and the test suite can mint tokens for known users.

Token payload:
    {"sub": "<user id>", "type": "access", "exp": <expiry>}
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token in the identity provider's format.

    Args:
        data: Payload data to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token({"sub": "42"})
        >>> token.count(".") == 2  # JWT format: header.payload.signature
        True
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_access_token(token: str) -> int | None:
    """
    Resolve a bearer credential into the acting user's id.

    Args:
        token: The JWT token string

    Returns:
        The user id from the "sub" claim, or None if the token is invalid,
        expired, not an access token, or carries a malformed subject
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if payload.get("type") != "access":
        logger.warning("Token type mismatch: expected access")
        return None

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning(f"Token subject is not a user id: {subject!r}")
        return None
