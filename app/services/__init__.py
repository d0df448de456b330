"""
Services Package

Business logic kept separate from HTTP handling so it can be tested
without the routers:
- books.py: Add, list and fetch books
- reviews.py: Submit, update and delete reviews
- ratings.py: Book rating aggregation
- search.py: Title/author search
- security.py: Bearer token verification
- rate_limiter.py: Rate limiting with slowapi
- transactions.py: Commit-or-rollback helper
- exceptions.py: Errors every service may raise
"""
