"""
Tests for Reviews

Tests the review system:
- Submit a review (authenticated)
- Update a review (owner only, partial)
- Delete a review (owner only)
- Book rating kept in sync with every change

Business Rules:
- One review per user per book
- Only the review author can update or delete it
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Book
from app.models.review import Review
from app.models.user import User
from app.services.exceptions import ConflictError
from app.services.security import create_access_token
from app.services.transactions import write_transaction


# =============================================================================
# Helper Functions
# =============================================================================


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Submit Review
# =============================================================================


class TestSubmitReview:
    """Tests for POST /books/{book_id}/reviews"""

    def test_submit_review_success(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": 5, "comment": "A haunting and brilliant novel."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Review submitted successfully"

        review = data["review"]
        assert review["rating"] == 5
        assert review["comment"] == "A haunting and brilliant novel."
        assert review["book"] == sample_book.id
        assert review["user"] == {"id": sample_user.id, "username": "testuser"}
        assert "createdAt" in review
        assert "updatedAt" in review

    def test_submit_review_updates_book_rating(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": 3, "comment": "Solid but a little slow."},
            headers=get_auth_header(sample_user),
        )

        book = client.get(f"/books/{sample_book.id}").json()["book"]
        assert book["averageRating"] == 3.0
        assert book["totalReviews"] == 1

    def test_submit_review_trims_comment(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": 4, "comment": "   Enjoyed every page.   "},
            headers=get_auth_header(sample_user),
        )

        assert response.json()["review"]["comment"] == "Enjoyed every page."

    def test_submit_review_duplicate(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        """Test a user cannot review the same book twice."""
        response = client.post(
            f"/books/{sample_review.book_id}/reviews",
            json={"rating": 5, "comment": "Trying to review again."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "You have already reviewed this book"}

    def test_submit_review_different_user(
        self,
        client: TestClient,
        sample_review: Review,
        second_user: User,
    ):
        """Test another user can review the same book."""
        response = client.post(
            f"/books/{sample_review.book_id}/reviews",
            json={"rating": 2, "comment": "Not for me, too bleak."},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_201_CREATED

        book = client.get(f"/books/{sample_review.book_id}").json()["book"]
        assert book["averageRating"] == 3.0
        assert book["totalReviews"] == 2

    def test_submit_review_book_not_found(
        self, client: TestClient, sample_user: User
    ):
        response = client.post(
            "/books/99999/reviews",
            json={"rating": 5, "comment": "This book does not exist."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Book not found"}

    def test_submit_review_invalid_rating(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        for rating in [0, 6]:
            response = client.post(
                f"/books/{sample_book.id}/reviews",
                json={"rating": rating, "comment": "Rating is out of range."},
                headers=get_auth_header(sample_user),
            )

            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json()["errors"][0]["field"] == "rating"

    def test_submit_review_boolean_rating(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        """Test true is not read as a 1-star rating."""
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": True, "comment": "Booleans are not ratings."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "rating"

    def test_submit_review_numeric_string_rating(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": "4", "comment": "Numeric strings are accepted."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["review"]["rating"] == 4

    def test_submit_review_comment_too_short(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        """Test the comment length is measured after trimming."""
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": 4, "comment": "   Short   "},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "comment"

    def test_submit_review_missing_fields(
        self, client: TestClient, sample_book: Book, sample_user: User
    ):
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"rating", "comment"}

    def test_submit_review_requires_auth(self, client: TestClient, sample_book: Book):
        response = client.post(
            f"/books/{sample_book.id}/reviews",
            json={"rating": 5, "comment": "Anonymous reviews are not allowed."},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Update Review
# =============================================================================


class TestUpdateReview:
    """Tests for PUT /reviews/{review_id}"""

    def test_update_review_rating_only(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        """Test omitted fields keep their current value."""
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"rating": 2},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Review updated successfully"
        assert data["review"]["rating"] == 2
        assert data["review"]["comment"] == "I really enjoyed reading this book."

        book = client.get(f"/books/{data['review']['book']}").json()["book"]
        assert book["averageRating"] == 2.0
        assert book["totalReviews"] == 1

    def test_update_review_comment_only(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"comment": "Changed my mind after a reread."},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        review = response.json()["review"]
        assert review["rating"] == 4
        assert review["comment"] == "Changed my mind after a reread."

    def test_update_review_empty_body(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["review"]["rating"] == 4

    def test_update_review_explicit_null(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        """Test a field that is present must be valid."""
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"rating": None},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "rating"

    def test_update_review_boolean_rating(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"rating": False},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "rating"

    def test_update_review_invalid_rating(
        self, client: TestClient, sample_review: Review, sample_user: User
    ):
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"rating": 7},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_review_not_owner(
        self, client: TestClient, sample_review: Review, second_user: User
    ):
        response = client.put(
            f"/reviews/{sample_review.id}",
            json={"rating": 1},
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "You can only update your own reviews"}

    def test_update_review_not_found(self, client: TestClient, sample_user: User):
        response = client.put(
            "/reviews/99999",
            json={"rating": 3},
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Review not found"}

    def test_update_review_requires_auth(
        self, client: TestClient, sample_review: Review
    ):
        response = client.put(f"/reviews/{sample_review.id}", json={"rating": 1})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Delete Review
# =============================================================================


class TestDeleteReview:
    """Tests for DELETE /reviews/{review_id}"""

    def test_delete_review_success(
        self,
        client: TestClient,
        db_session: Session,
        sample_review: Review,
        sample_user: User,
    ):
        review_id = sample_review.id
        book_id = sample_review.book_id

        response = client.delete(
            f"/reviews/{review_id}",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Review deleted successfully"}
        assert db_session.get(Review, review_id) is None

        book = client.get(f"/books/{book_id}").json()["book"]
        assert book["averageRating"] == 0
        assert book["totalReviews"] == 0

    def test_delete_review_not_owner(
        self, client: TestClient, sample_review: Review, second_user: User
    ):
        response = client.delete(
            f"/reviews/{sample_review.id}",
            headers=get_auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "You can only delete your own reviews"}

    def test_delete_review_not_found(self, client: TestClient, sample_user: User):
        response = client.delete(
            "/reviews/99999",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_review_requires_auth(
        self, client: TestClient, sample_review: Review
    ):
        response = client.delete(f"/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Rating Lifecycle
# =============================================================================


class TestRatingLifecycle:
    """The book's rating follows every review change."""

    def test_two_reviews_then_delete(
        self,
        client: TestClient,
        book_factory,
        sample_user: User,
        second_user: User,
    ):
        book = book_factory(title="Dune")

        first = client.post(
            f"/books/{book.id}/reviews",
            json={"rating": 4, "comment": "Dense but rewarding."},
            headers=get_auth_header(sample_user),
        ).json()["review"]
        client.post(
            f"/books/{book.id}/reviews",
            json={"rating": 2, "comment": "Could not get into it."},
            headers=get_auth_header(second_user),
        )

        data = client.get(f"/books/{book.id}").json()["book"]
        assert data["averageRating"] == 3.0
        assert data["totalReviews"] == 2

        client.delete(f"/reviews/{first['id']}", headers=get_auth_header(sample_user))

        data = client.get(f"/books/{book.id}").json()["book"]
        assert data["averageRating"] == 2.0
        assert data["totalReviews"] == 1

    def test_average_rounds_half_up(
        self, client: TestClient, db_session: Session, book_factory
    ):
        """Test 3, 2, 2, 2 (mean 2.25) is stored as 2.3."""
        book = book_factory()
        users = []
        for i in range(4):
            user = User(username=f"reader{i}", email=f"reader{i}@example.com")
            db_session.add(user)
            users.append(user)
        db_session.commit()

        for user, rating in zip(users, [3, 2, 2, 2]):
            response = client.post(
                f"/books/{book.id}/reviews",
                json={"rating": rating, "comment": "Thoughts on this book."},
                headers=get_auth_header(user),
            )
            assert response.status_code == status.HTTP_201_CREATED

        data = client.get(f"/books/{book.id}").json()["book"]
        assert data["averageRating"] == 2.3
        assert data["totalReviews"] == 4


# =============================================================================
# Uniqueness at the Database Level
# =============================================================================


class TestReviewUniqueness:
    """The (book, user) pair is unique even when the service check is bypassed."""

    def test_duplicate_review_rejected_by_database(
        self, db_session: Session, sample_review: Review
    ):
        db_session.add(
            Review(
                book_id=sample_review.book_id,
                user_id=sample_review.user_id,
                rating=1,
                comment="A second review for the same book.",
            )
        )

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_write_transaction_reports_conflict(
        self, db_session: Session, sample_review: Review
    ):
        """Test a unique violation inside a write becomes a ConflictError."""
        book_id = sample_review.book_id
        user_id = sample_review.user_id

        with pytest.raises(ConflictError) as exc_info:
            with write_transaction(db_session, conflict_message="Already reviewed"):
                db_session.add(
                    Review(
                        book_id=book_id,
                        user_id=user_id,
                        rating=1,
                        comment="A second review for the same book.",
                    )
                )

        assert exc_info.value.message == "Already reviewed"
        assert db_session.query(Review).count() == 1
