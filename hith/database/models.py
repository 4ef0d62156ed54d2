"""
Database Models - SQLAlchemy ORM models for persistent storage.

This module defines the database schema for:
- Users (one row per platform id, language refreshed on every message)
- Messages (append-only conversation turns)
- Journal entries (free-form notes saved from the journal page)
"""
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """
    A chat user, keyed by the platform-assigned id.

    Only `language` changes after creation.
    """
    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    display_name = Column(String(255), nullable=True)
    language = Column(String(2), nullable=False, default="en")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Message(Base):
    """
    One conversation turn, attributed to the user or the assistant.

    Rows are never updated or deleted.
    """
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False)
    role = Column(String(20), nullable=False)  # 'user', 'assistant'
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class JournalEntry(Base):
    """
    A journal note written by a user.

    The owner is identified by channel and the channel's user id as sent by
    the journal page, so no users row is required.
    """
    __tablename__ = "journal_entries"
    __table_args__ = (
        Index("ix_journal_owner_created", "channel", "user_ref", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(String(12), nullable=False, unique=True)
    channel = Column(String(20), nullable=False, default="tg")
    user_ref = Column(String(64), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
