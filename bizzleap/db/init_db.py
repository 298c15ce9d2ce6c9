"""
Database initialization.

Creates all tables for a fresh database. Production schemas are
managed with Alembic; this is the shortcut for development setups.
"""

import logging

from bizzleap.core.config import Settings, settings as default_settings
from bizzleap.db.session import Database

logger = logging.getLogger(__name__)


def init_db(settings: Settings = default_settings) -> None:
    """
    Initialize database schema.

    - Connects to the configured database (fails if unreachable)
    - Creates the users and user_sessions tables
    """
    database = Database.from_settings(settings)
    database.open()
    try:
        logger.info("Creating database tables...")
        database.create_all()
        logger.info("Tables created successfully")
    finally:
        database.close()


if __name__ == "__main__":
    init_db()
