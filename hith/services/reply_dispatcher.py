"""
Reply Dispatcher - Localized replies with quick-reply suggestions.

Every reply carries one row of up to four suggestion buttons in the
user's language. Pressing a button only echoes its label back to the
chat; it never re-enters the conversation pipeline.
"""
from typing import List, Optional, Tuple

from hith.core.language import SUGGESTION_LABELS, localized
from hith.core.logging_config import LoggerMixin
from hith.models.chat import ButtonActivation
from hith.services.channel import ReplyChannel

MAX_SUGGESTIONS = 4
SUGGESTION_PREFIX = "sugg"


def suggestion_buttons(language: str) -> List[Tuple[str, str]]:
    """(label, callback id) pairs for a language, English if unsupported."""
    labels = localized(SUGGESTION_LABELS, language)[:MAX_SUGGESTIONS]
    return [
        (label, f"{SUGGESTION_PREFIX}_{index}_{label}")
        for index, label in enumerate(labels)
    ]


def parse_suggestion_payload(payload: str) -> Optional[str]:
    """Extract the label from a 'sugg_<index>_<label>' payload."""
    parts = payload.split("_", 2)
    if len(parts) != 3 or parts[0] != SUGGESTION_PREFIX or not parts[1].isdigit():
        return None
    return parts[2] or None


class ReplyDispatcher(LoggerMixin):
    """
    Formats and sends replies through a ReplyChannel.

    Example:
        >>> dispatcher = ReplyDispatcher(channel)
        >>> await dispatcher.send(chat_id=42, text="Ciao!", language="it")
    """

    def __init__(self, channel: ReplyChannel):
        self.channel = channel

    async def send(self, chat_id: int, text: str, language: str) -> None:
        """
        Send a reply with the suggestion buttons attached.

        Raises:
            ChannelError: If delivery fails
        """
        await self.channel.send_text(chat_id, text, suggestion_buttons(language))
        self.logger.debug(f"Reply sent: chat={chat_id}, language={language}")

    async def send_plain(self, chat_id: int, text: str) -> None:
        """Send a reply without buttons."""
        await self.channel.send_text(chat_id, text)

    async def handle_button(self, activation: ButtonActivation) -> Optional[str]:
        """
        Echo the chosen label back into the chat.

        Returns:
            The echoed label, or None if the payload is not a suggestion
        """
        if activation.callback_id:
            await self.channel.acknowledge(activation.callback_id)

        label = parse_suggestion_payload(activation.payload)
        if label is None:
            self.logger.warning(f"Ignoring unknown button payload: {activation.payload[:32]}")
            return None

        await self.send_plain(activation.chat_id, f"→ {label}")
        return label
