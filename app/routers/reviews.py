"""
Reviews Router

Endpoints:
- POST /books/{book_id}/reviews - Submit a review (authenticated)
- PUT /reviews/{review_id} - Update your own review (partial)
- DELETE /reviews/{review_id} - Delete your own review

Business Rules:
- One review per user per book
- Only the review author can update or delete it
- Each change recomputes the book's averageRating and totalReviews
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import ActingUser, DbSession
from app.schemas import (
    MessageResponse,
    ReviewCreate,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
)
from app.services import reviews as review_service
from app.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a review",
    description="Review a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def submit_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: ActingUser,
) -> ReviewMutationResponse:
    """
    Submit a new review for a book.

    Raises:
        404: If the book does not exist
        400: If the user already reviewed this book, or validation fails
    """
    review = review_service.submit_review(db, book_id, review_data, current_user)

    return ReviewMutationResponse(
        message="Review submitted successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewMutationResponse,
    summary="Update a review",
    description="Update the rating and/or comment of your own review.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: ActingUser,
) -> ReviewMutationResponse:
    """
    Update an existing review. Omitted fields are left unchanged.

    Raises:
        404: If the review does not exist
        403: If the user is not the review author
    """
    review = review_service.update_review(db, review_id, review_data, current_user)

    return ReviewMutationResponse(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete your own review.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: ActingUser,
) -> MessageResponse:
    """
    Delete a review.

    Raises:
        404: If the review does not exist
        403: If the user is not the review author
    """
    review_service.delete_review(db, review_id, current_user)

    return MessageResponse(message="Review deleted successfully")
