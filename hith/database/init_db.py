"""
Database Initialization - Create the users, messages and journal tables.
"""
from typing import Optional

from hith.core.logging_config import get_logger
from hith.database.connection import DatabaseConnection, get_database
from hith.database.models import Base

logger = get_logger(__name__)


async def init_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create tables if they don't exist.

    Called once during application startup.

    Returns:
        True if tables were created successfully
    """
    db = db or get_database()
    try:
        async with db.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Conversation tables initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize conversation tables: {e}")
        raise
