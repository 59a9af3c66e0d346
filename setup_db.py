"""
Setup script for creating the CarLens database tables (users, cars).
Existing tables are left untouched.
"""

import logging
from carlens.core.config import settings
from carlens.db.init_db import init_db
from carlens.db.session import build_engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def setup_database():
    """Initialize database tables for the CarLens service."""
    logger.info("Creating CarLens database tables...")
    try:
        init_db(build_engine(str(settings.SQLALCHEMY_DATABASE_URI)))
        logger.info("Database tables created successfully!")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise

if __name__ == "__main__":
    setup_database()
