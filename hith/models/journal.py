"""
Journal API models.

The journal page posts raw strings; trimming and the non-empty checks
happen in the route so a blank field is reported as a validation error.
"""
from typing import List

from pydantic import BaseModel, Field


class JournalSaveRequest(BaseModel):
    """Body of POST /api/journal/save."""
    channel: str = Field(default="tg", max_length=20, description="Channel the user came from")
    user: str = Field(default="", max_length=64, description="Channel user id")
    text: str = Field(default="", description="Entry text")


class JournalEntryOut(BaseModel):
    id: str
    text: str
    created_at: str


class JournalSaveResponse(BaseModel):
    ok: bool = True
    entry: JournalEntryOut


class JournalListResponse(BaseModel):
    ok: bool = True
    items: List[JournalEntryOut] = Field(default_factory=list)
