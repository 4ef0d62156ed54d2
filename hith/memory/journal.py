"""
Journal Store - Free-form notes written from the journal page.

Entries are owned by a (channel, user) pair as sent by the page, so a
journal can exist before the user ever messaged the bot. Listing returns
the newest entries first.
"""
import secrets
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from hith.core.exceptions import StoreError
from hith.core.logging_config import get_logger
from hith.database.connection import DatabaseConnection, get_database
from hith.database.models import JournalEntry

logger = get_logger(__name__)

DEFAULT_CHANNEL = "tg"
DEFAULT_LIST_LIMIT = 20


def new_entry_id() -> str:
    """Short public id for an entry (12 hex characters)."""
    return secrets.token_hex(6)


class JournalStore:
    """
    Database-backed journal.

    Example:
        >>> journal = JournalStore()
        >>> entry = await journal.save_entry("tg", "42", "Walked by the lake")
        >>> await journal.list_entries("tg", "42")
        [{"id": "9f2c...", "text": "Walked by the lake", "created_at": "..."}]
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    async def save_entry(self, channel: str, user_ref: str, text: str) -> Dict[str, str]:
        """
        Store one entry.

        Returns:
            The saved entry as {"id", "text", "created_at"}

        Raises:
            StoreError: If the insert fails
        """
        entry = JournalEntry(
            entry_id=new_entry_id(),
            channel=channel,
            user_ref=user_ref,
            text=text,
            created_at=datetime.utcnow(),
        )
        try:
            async with self.db.get_session() as session:
                session.add(entry)
        except SQLAlchemyError as e:
            raise StoreError("save_journal_entry", f"Failed to save journal entry for {channel}:{user_ref}: {e}") from e

        logger.debug(f"Saved journal entry: owner={channel}:{user_ref}, length={len(text)}")
        return self._to_payload(entry.entry_id, entry.text, entry.created_at)

    async def list_entries(
        self,
        channel: str,
        user_ref: str,
        limit: int = DEFAULT_LIST_LIMIT
    ) -> List[Dict[str, str]]:
        """
        Return up to `limit` entries, newest first.

        Raises:
            StoreError: If the query fails
        """
        if limit <= 0:
            return []

        query = (
            select(JournalEntry.entry_id, JournalEntry.text, JournalEntry.created_at)
            .where(JournalEntry.channel == channel, JournalEntry.user_ref == user_ref)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .limit(limit)
        )
        try:
            async with self.db.get_session() as session:
                rows = (await session.execute(query)).all()
        except SQLAlchemyError as e:
            raise StoreError("list_journal_entries", f"Failed to list journal for {channel}:{user_ref}: {e}") from e

        return [self._to_payload(entry_id, text, created_at) for entry_id, text, created_at in rows]

    @staticmethod
    def _to_payload(entry_id: str, text: str, created_at: datetime) -> Dict[str, str]:
        return {"id": entry_id, "text": text, "created_at": created_at.isoformat()}
