"""
Database module - Async SQLAlchemy access layer.

This module handles:
- Database connection management
- ORM models for users, messages and journal entries
- Table initialization
"""
from hith.database.connection import DatabaseConnection, get_database
from hith.database.models import Base, JournalEntry, Message, User
from hith.database.init_db import init_tables

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    # Models
    "Base",
    "User",
    "Message",
    "JournalEntry",
    # Init
    "init_tables",
]
