"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- No database queries (those belong in memory/ and database/)
- Orchestrate between rate limiter, memory, LLM and reply channel
"""
from hith.services.channel import ReplyChannel, TelegramReplyChannel, get_reply_channel, register_webhook
from hith.services.chat_service import ChatService, ConversationResult, Outcome
from hith.services.reply_dispatcher import ReplyDispatcher, suggestion_buttons

__all__ = [
    "ChatService",
    "ConversationResult",
    "Outcome",
    "ReplyChannel",
    "ReplyDispatcher",
    "TelegramReplyChannel",
    "get_reply_channel",
    "register_webhook",
    "suggestion_buttons",
]
