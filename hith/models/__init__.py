"""
Models module - Pydantic schemas for data validation.

This module defines:
- Webhook payloads: Telegram updates as delivered to the webhook
- Events: channel-neutral inputs for the conversation pipeline
- Journal: request and response bodies of the journal API
- Response models: Output formatting for API responses
"""
from hith.models.chat import (
    InboundTextMessage,
    ButtonActivation,
    HealthResponse,
    ErrorResponse,
)
from hith.models.journal import (
    JournalSaveRequest,
    JournalEntryOut,
    JournalSaveResponse,
    JournalListResponse,
)
from hith.models.telegram import (
    TelegramUpdate,
    TelegramMessage,
    TelegramCallbackQuery,
    TelegramUser,
    TelegramChat,
)

__all__ = [
    "InboundTextMessage",
    "ButtonActivation",
    "HealthResponse",
    "ErrorResponse",
    "JournalSaveRequest",
    "JournalEntryOut",
    "JournalSaveResponse",
    "JournalListResponse",
    "TelegramUpdate",
    "TelegramMessage",
    "TelegramCallbackQuery",
    "TelegramUser",
    "TelegramChat",
]
