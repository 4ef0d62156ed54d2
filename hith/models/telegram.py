"""
Telegram webhook payloads.

Only the fields the bot reads are modelled; everything else in an update
is ignored.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TelegramUser(TelegramModel):
    id: int
    first_name: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(TelegramModel):
    id: int


class TelegramMessage(TelegramModel):
    message_id: int
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    text: Optional[str] = None


class TelegramCallbackQuery(TelegramModel):
    id: str
    from_user: TelegramUser = Field(alias="from")
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None


class TelegramUpdate(TelegramModel):
    """One webhook delivery. At most one of the optional parts is set."""
    update_id: int
    message: Optional[TelegramMessage] = None
    callback_query: Optional[TelegramCallbackQuery] = None
