#!/usr/bin/env python3
"""
Rating Recalculation Script

Recomputes averageRating and totalReviews for every book from its reviews.

A review change and its rating update are committed together, but rows
written before that was the case, or edited by hand in the database, can
still be out of sync. Running this script repairs them.

Usage:
    # From project root with venv activated:
    python scripts/recalculate_ratings.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.database import SessionLocal
from app.services.ratings import recalculate_all_book_ratings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    logger.info("Starting rating recalculation...")

    db = SessionLocal()
    try:
        updated = recalculate_all_book_ratings(db)
    except Exception:
        db.rollback()
        logger.exception("Rating recalculation failed")
        return 1
    finally:
        db.close()

    logger.info(f"Rating recalculation complete: {updated} books updated")
    return 0


if __name__ == "__main__":
    sys.exit(main())
