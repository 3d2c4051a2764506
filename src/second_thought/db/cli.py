"""CLI entry point for creating the database schema."""
import logging

from second_thought.config import Settings
from second_thought.db.sessions import create_db_engine, init_db

logger = logging.getLogger(__name__)


def init() -> None:
    """Create all tables in DATABASE_URL."""
    logging.basicConfig(level=logging.INFO)
    settings = Settings.from_env()
    init_db(create_db_engine(settings.database_url, echo=settings.sql_echo))
    logger.info("Database schema ready")
