"""
User Directory - Upsert of user identity and language.

A user row is created on the first message from an unseen id. On every
later message only `language` is overwritten; `display_name` keeps the
value from creation.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from hith.core.exceptions import StoreError
from hith.core.logging_config import get_logger
from hith.database.connection import DatabaseConnection, get_database
from hith.database.models import User

logger = get_logger(__name__)


class UserDirectory:
    """
    Database-backed user directory.

    Example:
        >>> users = UserDirectory()
        >>> await users.ensure_user(42, "it", "Giulia")
        >>> await users.ensure_user(42, "de", "Giulia")  # language -> "de"
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    async def ensure_user(
        self,
        user_id: int,
        language: str,
        display_name: Optional[str] = None
    ) -> None:
        """
        Create the user or refresh its language.

        Idempotent: repeated calls with the same arguments leave one row
        and the same final state.

        Raises:
            StoreError: If the lookup or the write fails.
        """
        try:
            async with self.db.get_session() as session:
                existing = await session.scalar(select(User.id).where(User.id == user_id))

                if existing is None:
                    session.add(User(id=user_id, display_name=display_name, language=language))
                    logger.info(f"Created user {user_id} (language={language})")
                else:
                    await self._set_language(session, user_id, language)

        except IntegrityError:
            # Another message from the same user inserted the row first
            logger.debug(f"User {user_id} created concurrently, updating language")
            await self._update_language(user_id, language)

        except SQLAlchemyError as e:
            raise StoreError("ensure_user", f"Failed to upsert user {user_id}: {e}") from e

    async def get_user(self, user_id: int) -> Optional[User]:
        """Fetch a user row, or None if unknown."""
        try:
            async with self.db.get_session() as session:
                return await session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError("get_user", f"Failed to load user {user_id}: {e}") from e

    async def _update_language(self, user_id: int, language: str) -> None:
        try:
            async with self.db.get_session() as session:
                await self._set_language(session, user_id, language)
        except SQLAlchemyError as e:
            raise StoreError("ensure_user", f"Failed to update user {user_id}: {e}") from e

    @staticmethod
    async def _set_language(session, user_id: int, language: str) -> None:
        await session.execute(
            update(User)
            .where(User.id == user_id)
            .values(language=language, updated_at=datetime.utcnow())
        )
