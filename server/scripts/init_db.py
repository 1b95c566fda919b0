# server/scripts/init_db.py
"""
Database initialization script - Create tables and default categories

Usage:
    python scripts/init_db.py

This script will:
1. Test the database connection
2. Create all database tables
3. Create the default maintenance categories if they are missing
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import init_db, test_connection, get_db_context
from core.config import DATABASE_URL
from core.logger import get_logger
from models.category import Category

logger = get_logger(__name__)

# (name, code)
DEFAULT_CATEGORIES = [
    ("Electrical", "ELEC"),
    ("Plumbing", "PLMB"),
    ("Carpentry", "CARP"),
    ("Air Conditioning", "AIRC"),
    ("Painting", "PNT"),
    ("Janitorial", "JAN"),
]


def seed_categories() -> bool:
    """
    Create the default categories that do not exist yet.

    Returns:
        True if successful, False otherwise
    """
    with get_db_context() as db:
        try:
            existing = {code for (code,) in db.query(Category.code).all()}
            created = 0
            for name, code in DEFAULT_CATEGORIES:
                if code in existing:
                    continue
                db.add(Category(name=name, code=code))
                created += 1
            db.commit()

            logger.info(f"✓ Default categories ready ({created} created)")
            return True

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to seed categories: {e}")
            return False


def initialize_database() -> bool:
    """
    Initialize database with tables and default categories.

    Returns:
        True if successful, False otherwise
    """
    logger.info("Maintenance Desk Database Initialization")

    if not test_connection():
        logger.error("❌ Cannot connect to database")
        logger.error(f"Database URL: {DATABASE_URL}")
        return False

    if not init_db():
        logger.error("❌ Failed to initialize database tables")
        return False

    if not seed_categories():
        logger.error("❌ Failed to create default categories")
        return False

    logger.info("✅ DATABASE INITIALIZATION COMPLETE")
    return True


if __name__ == "__main__":
    try:
        success = initialize_database()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        logger.info("Initialization cancelled by user")
        sys.exit(1)
