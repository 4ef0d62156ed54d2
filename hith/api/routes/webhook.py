"""
Webhook Routes - Inbound Telegram updates.

The path carries a secret derived from the bot token, so only Telegram
(which received the URL at registration) can reach the handlers. Updates
are translated into channel-neutral events:
- text message  -> ChatService.handle_text_message
- /start        -> ChatService.welcome
- other /commands are ignored
- button press  -> ChatService.handle_button

The route always answers 200 once the update has been handled; pipeline
failures end in a fallback reply, never in an HTTP error that Telegram
would retry.
"""
import hmac
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError as PydanticValidationError

from hith.core.config import Settings, get_settings
from hith.core.exceptions import HithException, ValidationError
from hith.core.logging_config import get_logger
from hith.models.chat import ButtonActivation, InboundTextMessage
from hith.models.telegram import TelegramCallbackQuery, TelegramMessage, TelegramUpdate
from hith.services.channel import get_reply_channel
from hith.services.chat_service import ChatService
from hith.services.reply_dispatcher import ReplyDispatcher

logger = get_logger(__name__)

router = APIRouter(
    prefix="/tg",
    tags=["Webhook"],
)

_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the chat service instance."""
    global _chat_service
    if _chat_service is None:
        settings = get_settings()
        _chat_service = ChatService(
            ReplyDispatcher(get_reply_channel()),
            history_limit=settings.history_limit
        )
    return _chat_service


async def close_chat_service() -> None:
    """Release the completion client of the chat service, if one was built."""
    global _chat_service
    if _chat_service is None:
        return
    await _chat_service.completion_client.close()
    _chat_service = None


@router.post(
    "/{secret}",
    summary="Telegram webhook",
    include_in_schema=False,
)
async def telegram_webhook(
    secret: str,
    request: Request,
    service: ChatService = Depends(get_chat_service),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Receive one Telegram update and route it."""
    # Bytes comparison: compare_digest rejects non-ASCII str arguments
    if not hmac.compare_digest(secret.encode("utf-8"), settings.webhook_secret.encode("utf-8")):
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        update = TelegramUpdate.model_validate(await request.json())
    except (PydanticValidationError, ValueError) as e:
        logger.warning(f"Malformed update rejected: {e}")
        raise ValidationError("Malformed Telegram update", field="body") from e

    try:
        if update.callback_query is not None:
            return await _handle_callback(update.callback_query, service)
        if update.message is not None:
            return await _handle_message(update.message, service)
    except HithException as e:
        # Delivery failed outside the pipeline's own fallback handling
        logger.error(f"Update {update.update_id} not delivered ({e.error_code}): {e.message}")
        return {"ok": True, "event": "error"}

    return {"ok": True, "event": "ignored"}


async def _handle_message(message: TelegramMessage, service: ChatService) -> dict:
    text = (message.text or "").strip()
    if not text or message.from_user is None:
        return {"ok": True, "event": "ignored"}

    event = InboundTextMessage(
        user_id=message.from_user.id,
        chat_id=message.chat.id,
        text=text,
        locale_hint=message.from_user.language_code,
        display_name=message.from_user.first_name,
    )

    if text.split()[0].split("@")[0] == "/start":
        await service.welcome(event)
        return {"ok": True, "event": "start"}

    if text.startswith("/"):
        return {"ok": True, "event": "ignored"}

    result = await service.handle_text_message(event)
    return {"ok": True, "event": "text", "outcome": result.outcome.value}


async def _handle_callback(query: TelegramCallbackQuery, service: ChatService) -> dict:
    chat_id = query.message.chat.id if query.message is not None else query.from_user.id
    label = await service.handle_button(ButtonActivation(
        user_id=query.from_user.id,
        chat_id=chat_id,
        payload=query.data or "",
        callback_id=query.id,
    ))
    return {"ok": True, "event": "button", "label": label}
