"""
Reply Channel - Outbound messaging to the chat platform.

The conversation pipeline only needs three operations, described by
`ReplyChannel`. `TelegramReplyChannel` implements them with
python-telegram-bot; tests substitute a recording fake.
"""
from typing import Optional, Protocol, Sequence, Tuple

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.constants import ChatAction
from telegram.error import TelegramError

from hith.core.exceptions import ChannelError
from hith.core.logging_config import get_logger

logger = get_logger(__name__)

# (label, callback id) pairs rendered as one row of buttons
Buttons = Sequence[Tuple[str, str]]

ALLOWED_UPDATES = ["message", "callback_query"]


class ReplyChannel(Protocol):
    async def send_text(self, chat_id: int, text: str, buttons: Buttons = ()) -> None:
        ...

    async def send_typing(self, chat_id: int) -> None:
        ...

    async def acknowledge(self, callback_id: str) -> None:
        ...


class TelegramReplyChannel:
    """Sends replies through the Telegram Bot API."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, chat_id: int, text: str, buttons: Buttons = ()) -> None:
        reply_markup = None
        if buttons:
            reply_markup = InlineKeyboardMarkup([[
                InlineKeyboardButton(label, callback_data=callback_id)
                for label, callback_id in buttons
            ]])
        try:
            await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=reply_markup)
        except TelegramError as e:
            raise ChannelError(f"Failed to send message to {chat_id}: {e}") from e

    async def send_typing(self, chat_id: int) -> None:
        try:
            await self.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)
        except TelegramError as e:
            raise ChannelError(f"Failed to send typing action to {chat_id}: {e}") from e

    async def acknowledge(self, callback_id: str) -> None:
        try:
            await self.bot.answer_callback_query(callback_query_id=callback_id)
        except TelegramError as e:
            raise ChannelError(f"Failed to answer callback {callback_id}: {e}") from e


async def register_webhook(bot: Bot, url: Optional[str]) -> bool:
    """
    Point the bot's webhook at this server.

    Pending updates are dropped first. A failure is logged and reported
    through the return value; the HTTP server keeps serving, but the bot
    stays unreachable until the webhook is registered.

    Returns:
        True if the webhook was registered
    """
    if not url:
        logger.warning("PUBLIC_URL not set, skipping webhook registration")
        return False

    try:
        await bot.delete_webhook(drop_pending_updates=True)
        await bot.set_webhook(url=url, allowed_updates=ALLOWED_UPDATES)
    except TelegramError as e:
        logger.error(f"Telegram setWebhook failed: {e}")
        return False

    logger.info(f"Telegram webhook registered: {url.rsplit('/', 1)[0]}/...")
    return True


# Process-wide bot and channel
_bot: Optional[Bot] = None
_reply_channel: Optional[TelegramReplyChannel] = None


def get_bot() -> Bot:
    """Get or create the Telegram bot from settings."""
    global _bot
    if _bot is None:
        from hith.core.config import get_settings
        _bot = Bot(token=get_settings().bot_token)
    return _bot


def get_reply_channel() -> TelegramReplyChannel:
    """Get or create the Telegram reply channel."""
    global _reply_channel
    if _reply_channel is None:
        _reply_channel = TelegramReplyChannel(get_bot())
    return _reply_channel
