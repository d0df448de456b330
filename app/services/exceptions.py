"""
Service Exceptions

Every service call either succeeds or raises exactly one of these.
Routers never catch them: the handlers registered in app.main turn each
one into its HTTP status code and a safe message.

Taxonomy:
- ValidationError (400): malformed or out-of-range input, lists every field
- AuthenticationError (401): missing or invalid bearer credential
- AuthorizationError (403): caller is not the owner of the resource
- NotFoundError (404): referenced book or review does not exist
- ConflictError (400): duplicate review or duplicate ISBN
- UnexpectedError (500): persistence failure; detail is only logged
"""

from fastapi import status


class BooksAPIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict:
        return {"error": self.message}


class ValidationError(BooksAPIError):
    """
    Input failed validation.

    Args:
        errors: One dict per failing field with "field", "message"
            and "location" keys.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[dict]) -> None:
        super().__init__("Validation failed")
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str, location: str = "body") -> "ValidationError":
        return cls([{"field": field, "message": message, "location": location}])

    def to_content(self) -> dict:
        return {"errors": self.errors}


class AuthenticationError(BooksAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(BooksAPIError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BooksAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BooksAPIError):
    # Duplicates are reported as bad requests, not 409
    status_code = status.HTTP_400_BAD_REQUEST


class UnexpectedError(BooksAPIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An internal error occurred.") -> None:
        super().__init__(message)
