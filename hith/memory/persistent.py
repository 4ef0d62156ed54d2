"""
Message Store - Append-only conversation log with bounded history reads.

Every turn is written straight to the database; there is no in-process
cache, so history survives restarts and reflects exactly what was stored.

Ordering:
- timestamps are assigned here and never go backwards within a store
- history reads sort by (created_at, id), so rows sharing a timestamp
  still come back in insertion order
"""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from hith.core.exceptions import StoreError
from hith.core.logging_config import get_logger
from hith.database.connection import DatabaseConnection, get_database
from hith.database.models import Message

logger = get_logger(__name__)

ROLES = ("user", "assistant")


class MessageStore:
    """
    Database-backed message log.

    Example:
        >>> store = MessageStore()
        >>> await store.append(42, "user", "Ciao")
        >>> await store.recent_history(42, limit=8)
        [{"role": "user", "content": "Ciao"}]
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()
        self._last_created_at: Optional[datetime] = None

    async def append(self, user_id: int, role: str, content: str) -> None:
        """
        Insert one turn with a store-assigned timestamp.

        Args:
            user_id: Owner of the conversation
            role: 'user' or 'assistant'
            content: Message text, stored as-is

        Raises:
            ValueError: If role is not a conversation role
            StoreError: If the insert fails
        """
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")

        created_at = self._next_timestamp()
        try:
            async with self.db.get_session() as session:
                session.add(Message(
                    user_id=user_id,
                    role=role,
                    content=content,
                    created_at=created_at
                ))
        except SQLAlchemyError as e:
            raise StoreError("append", f"Failed to save {role} message for {user_id}: {e}") from e

        logger.debug(f"Saved message: user={user_id}, role={role}, length={len(content)}")

    async def recent_history(self, user_id: int, limit: int) -> List[Dict[str, str]]:
        """
        Return up to `limit` most recent turns for a user, oldest first.

        Raises:
            StoreError: If the query fails
        """
        if limit <= 0:
            return []

        query = (
            select(Message.role, Message.content)
            .where(Message.user_id == user_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
        )
        try:
            async with self.db.get_session() as session:
                rows = (await session.execute(query)).all()
        except SQLAlchemyError as e:
            raise StoreError("recent_history", f"Failed to read history for {user_id}: {e}") from e

        # Newest-first from the query; callers expect oldest-first
        return [{"role": role, "content": content} for role, content in reversed(rows)]

    def _next_timestamp(self) -> datetime:
        now = datetime.utcnow()
        if self._last_created_at is not None and now < self._last_created_at:
            now = self._last_created_at
        self._last_created_at = now
        return now
