"""
User Pydantic Schemas

Users are owned by the identity provider, so the API never accepts user
payloads. These schemas are the partial snapshots used when a book's
addedBy or a review's user reference is expanded in a response.
"""

from pydantic import Field

from app.schemas.common import CamelModel


class UserSummary(CamelModel):
    """Public snapshot: id and username."""

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Display name")


class UserContact(UserSummary):
    """Snapshot including the email, returned to the user who added a book."""

    email: str = Field(..., description="User's email address")
