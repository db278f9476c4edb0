"""Create the gallery tables on a local development database.

The hosted database already carries the schema; this is only for local
SQLite setups and tests against a scratch database.
"""
import logging

from humor_gallery.core.settings import settings
from humor_gallery.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    init_db()
