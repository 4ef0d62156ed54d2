"""
Memory Package - Users, conversation history and journal.

- UserDirectory: upsert of user identity and language
- MessageStore: append-only turn log with bounded, oldest-first history
- JournalStore: journal entries saved and listed by the journal page

All are database-backed; use the factory functions to share one
instance per process.
"""
from typing import Optional

from hith.memory.journal import JournalStore
from hith.memory.persistent import MessageStore
from hith.memory.users import UserDirectory

_user_directory: Optional[UserDirectory] = None
_message_store: Optional[MessageStore] = None
_journal_store: Optional[JournalStore] = None


def get_user_directory() -> UserDirectory:
    """Get or create the global user directory."""
    global _user_directory
    if _user_directory is None:
        _user_directory = UserDirectory()
    return _user_directory


def get_message_store() -> MessageStore:
    """Get or create the global message store."""
    global _message_store
    if _message_store is None:
        _message_store = MessageStore()
    return _message_store


def get_journal_store() -> JournalStore:
    """Get or create the global journal store."""
    global _journal_store
    if _journal_store is None:
        _journal_store = JournalStore()
    return _journal_store


__all__ = [
    "UserDirectory",
    "MessageStore",
    "JournalStore",
    "get_user_directory",
    "get_message_store",
    "get_journal_store",
]
