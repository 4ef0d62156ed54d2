"""
Journal Routes - Save and list journal entries.

Used by the journal page linked from the bot's Journal button:
- POST /api/journal/save : store one entry for (channel, user)
- GET  /api/journal/list : newest entries for (channel, user)

A store failure surfaces as a 503 through the HithException handler.
"""
from fastapi import APIRouter, Depends, Query

from hith.core.exceptions import ValidationError
from hith.core.logging_config import get_logger
from hith.memory import JournalStore, get_journal_store
from hith.memory.journal import DEFAULT_CHANNEL, DEFAULT_LIST_LIMIT
from hith.models.chat import ErrorResponse
from hith.models.journal import JournalListResponse, JournalSaveRequest, JournalSaveResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/journal",
    tags=["Journal"],
    responses={
        400: {"model": ErrorResponse, "description": "Missing user or text"},
        503: {"model": ErrorResponse, "description": "Journal storage unavailable"},
    }
)


@router.post(
    "/save",
    response_model=JournalSaveResponse,
    summary="Save a journal entry",
)
async def save_entry(
    request: JournalSaveRequest,
    journal: JournalStore = Depends(get_journal_store),
) -> JournalSaveResponse:
    channel = request.channel.strip() or DEFAULT_CHANNEL
    user = request.user.strip()
    text = request.text.strip()

    if not user:
        raise ValidationError("Journal user is required", field="user")
    if not text:
        raise ValidationError("Journal text is required", field="text")

    entry = await journal.save_entry(channel, user, text)
    logger.info(f"Journal entry saved: owner={channel}:{user}")
    return JournalSaveResponse(entry=entry)


@router.get(
    "/list",
    response_model=JournalListResponse,
    summary="List recent journal entries",
)
async def list_entries(
    channel: str = Query(default=DEFAULT_CHANNEL, max_length=20),
    user: str = Query(default="", max_length=64),
    journal: JournalStore = Depends(get_journal_store),
) -> JournalListResponse:
    """An empty user yields an empty list rather than an error."""
    user = user.strip()
    if not user:
        return JournalListResponse(items=[])

    items = await journal.list_entries(channel.strip() or DEFAULT_CHANNEL, user, DEFAULT_LIST_LIMIT)
    return JournalListResponse(items=items)
