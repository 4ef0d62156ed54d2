"""
Chat Service - Per-user conversation pipeline.

This service orchestrates the flow for one inbound text message:
1. Rate-limit gate (rejected messages are dropped silently)
2. Resolve language, upsert the user
3. Save the user turn, read the history window
4. Assemble the prompt and call the completion endpoint
5. Save the assistant turn and send the reply with suggestions

Every stage is awaited, so pipelines of different users interleave
freely; per-user ordering is only as strong as the rate limiter makes it.
A failure after the gate is caught once, in handle_text_message, and
turned into a localized fallback reply.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from hith.core.exceptions import ChannelError, HithException, StoreError
from hith.core.language import FALLBACK_MESSAGES, WELCOME_MESSAGES, LanguageResolver, localized
from hith.core.logging_config import get_logger
from hith.core.rate_limiter import RateLimiter, get_rate_limiter
from hith.llm.client import CompletionClient
from hith.llm.prompts import PromptAssembler
from hith.memory import MessageStore, UserDirectory, get_message_store, get_user_directory
from hith.models.chat import ButtonActivation, InboundTextMessage
from hith.services.reply_dispatcher import ReplyDispatcher

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 8


class Outcome(str, Enum):
    DROPPED = "dropped"
    REPLIED = "replied"
    FALLBACK = "fallback"


@dataclass
class ConversationResult:
    """
    What happened to one inbound message.

    Attributes:
        outcome: dropped by the gate, replied, or answered with the fallback
        language: Resolved language (None when dropped)
        reply: Text sent to the user
        error: The caught failure when outcome is FALLBACK; a StoreError or
            LLMRequestError can be told apart with isinstance
    """
    outcome: Outcome
    language: Optional[str] = None
    reply: Optional[str] = None
    error: Optional[Exception] = None


class ChatService:
    """
    Runs the conversation pipeline for inbound chat events.

    Example:
        >>> service = ChatService(ReplyDispatcher(channel))
        >>> result = await service.handle_text_message(
        ...     InboundTextMessage(user_id=42, chat_id=42, text="Ciao", locale_hint="it-IT")
        ... )
        >>> result.outcome
        <Outcome.REPLIED: 'replied'>
    """

    def __init__(
        self,
        reply_dispatcher: ReplyDispatcher,
        rate_limiter: Optional[RateLimiter] = None,
        user_directory: Optional[UserDirectory] = None,
        message_store: Optional[MessageStore] = None,
        completion_client: Optional[CompletionClient] = None,
        language_resolver: Optional[LanguageResolver] = None,
        prompt_assembler: Optional[PromptAssembler] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        """
        Initialize the chat service.

        Collaborators that are not provided fall back to the process-wide
        instances built from settings.
        """
        self.dispatcher = reply_dispatcher
        self.rate_limiter = rate_limiter if rate_limiter is not None else get_rate_limiter()
        self.users = user_directory if user_directory is not None else get_user_directory()
        self.store = message_store if message_store is not None else get_message_store()
        self.completion_client = completion_client if completion_client is not None else CompletionClient()
        self.resolver = language_resolver or LanguageResolver()
        self.assembler = prompt_assembler or PromptAssembler()
        self.history_limit = history_limit
        logger.info(f"ChatService initialized: history_limit={history_limit}")

    async def handle_text_message(self, event: InboundTextMessage) -> ConversationResult:
        """
        Process one text message end to end.

        Never raises for StoreError, LLMRequestError or ChannelError: these
        end in a fallback reply and are returned in the result.
        """
        if not self.rate_limiter.allow(event.user_id):
            return ConversationResult(outcome=Outcome.DROPPED)

        language = self.resolver.resolve(event.locale_hint)
        logger.info(
            f"Processing message: user={event.user_id}, language={language}, "
            f"message_length={len(event.text)}"
        )

        try:
            reply = await self._converse(event, language)
            await self.dispatcher.send(event.chat_id, reply, language)

        except HithException as e:
            logger.error(f"Reply failed for user {event.user_id} ({e.error_code}): {e.message}")
            return await self._fallback(event.chat_id, language, e)

        except Exception as e:
            logger.exception(f"Unexpected error in chat pipeline: {e}")
            return await self._fallback(event.chat_id, language, e)

        logger.info(f"Message processed: user={event.user_id}, response_length={len(reply)}")
        return ConversationResult(outcome=Outcome.REPLIED, language=language, reply=reply)

    async def welcome(self, event: InboundTextMessage) -> str:
        """
        Greet a user who started the bot.

        The user row is created if needed; the greeting itself is not
        stored as a turn and does not consume the rate limit.
        """
        language = self.resolver.resolve(event.locale_hint)
        try:
            await self.users.ensure_user(event.user_id, language, event.display_name)
        except StoreError as e:
            logger.warning(f"Could not register user {event.user_id} on start: {e.message}")

        text = localized(WELCOME_MESSAGES, language)
        await self.dispatcher.send(event.chat_id, text, language)
        return text

    async def handle_button(self, activation: ButtonActivation) -> Optional[str]:
        """Echo a pressed suggestion; see ReplyDispatcher.handle_button."""
        return await self.dispatcher.handle_button(activation)

    async def _converse(self, event: InboundTextMessage, language: str) -> str:
        await self.users.ensure_user(event.user_id, language, event.display_name)

        # A failed user-turn write aborts the message (fail closed)
        await self.store.append(event.user_id, "user", event.text)

        await self._send_typing(event.chat_id)
        history = await self._load_history(event.user_id)
        messages = self.assembler.assemble(language, history, event.text)

        reply = await self.completion_client.complete(messages)
        await self.store.append(event.user_id, "assistant", reply)
        return reply

    async def _load_history(self, user_id: int) -> List[Dict[str, str]]:
        try:
            return await self.store.recent_history(user_id, self.history_limit)
        except StoreError as e:
            logger.warning(f"History unavailable for user {user_id}, continuing without: {e.message}")
            return []

    async def _send_typing(self, chat_id: int) -> None:
        try:
            await self.dispatcher.channel.send_typing(chat_id)
        except ChannelError as e:
            logger.debug(f"Typing indicator not sent: {e.message}")

    async def _fallback(self, chat_id: int, language: str, error: Exception) -> ConversationResult:
        text = localized(FALLBACK_MESSAGES, language)
        try:
            await self.dispatcher.send_plain(chat_id, text)
        except ChannelError as e:
            logger.error(f"Fallback reply could not be delivered to {chat_id}: {e.message}")
        return ConversationResult(
            outcome=Outcome.FALLBACK,
            language=language,
            reply=text,
            error=error
        )
