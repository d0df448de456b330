"""
Test Suite for the Book Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_books.py: Tests for /books endpoints
- test_reviews.py: Tests for review endpoints and rating updates
- test_search.py: Tests for /search
- test_ratings.py: Tests for the ratings service
- test_main.py: Health check, root endpoint and bearer tokens

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_reviews.py

    # Run with verbose output
    pytest -v
"""
