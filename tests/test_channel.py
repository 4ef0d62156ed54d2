"""Tests for the Telegram reply channel and webhook registration."""
import pytest
from telegram.error import TelegramError

from hith.core.exceptions import ChannelError
from hith.services.channel import ALLOWED_UPDATES, TelegramReplyChannel, register_webhook


class FakeBot:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def _record(self, name, **kwargs):
        if self.fail:
            raise TelegramError("Bad Request: chat not found")
        self.calls.append((name, kwargs))
        return True

    async def send_message(self, **kwargs):
        return await self._record("send_message", **kwargs)

    async def send_chat_action(self, **kwargs):
        return await self._record("send_chat_action", **kwargs)

    async def answer_callback_query(self, **kwargs):
        return await self._record("answer_callback_query", **kwargs)

    async def delete_webhook(self, **kwargs):
        return await self._record("delete_webhook", **kwargs)

    async def set_webhook(self, **kwargs):
        return await self._record("set_webhook", **kwargs)


async def test_send_text_builds_one_row_of_buttons():
    bot = FakeBot()
    channel = TelegramReplyChannel(bot)

    await channel.send_text(42, "Ciao", [("Journal", "sugg_0_Journal"), ("SOS", "sugg_3_SOS")])

    name, kwargs = bot.calls[-1]
    assert name == "send_message"
    assert kwargs["chat_id"] == 42
    assert kwargs["text"] == "Ciao"
    row = kwargs["reply_markup"].inline_keyboard[0]
    assert [(b.text, b.callback_data) for b in row] == [
        ("Journal", "sugg_0_Journal"),
        ("SOS", "sugg_3_SOS"),
    ]


async def test_send_text_without_buttons_has_no_markup():
    bot = FakeBot()

    await TelegramReplyChannel(bot).send_text(42, "→ Coach")

    assert bot.calls[-1][1]["reply_markup"] is None


async def test_acknowledge_and_typing():
    bot = FakeBot()
    channel = TelegramReplyChannel(bot)

    await channel.acknowledge("cb-1")
    await channel.send_typing(42)

    assert bot.calls[0] == ("answer_callback_query", {"callback_query_id": "cb-1"})
    assert bot.calls[1][0] == "send_chat_action"


async def test_telegram_errors_become_channel_errors():
    channel = TelegramReplyChannel(FakeBot(fail=True))

    with pytest.raises(ChannelError):
        await channel.send_text(42, "Ciao")


async def test_register_webhook():
    bot = FakeBot()

    assert await register_webhook(bot, "https://example.test/tg/secret") is True
    assert bot.calls[0] == ("delete_webhook", {"drop_pending_updates": True})
    assert bot.calls[1] == ("set_webhook", {
        "url": "https://example.test/tg/secret",
        "allowed_updates": ALLOWED_UPDATES,
    })


async def test_register_webhook_failure_is_not_fatal():
    assert await register_webhook(FakeBot(fail=True), "https://example.test/tg/secret") is False


async def test_register_webhook_without_public_url():
    bot = FakeBot()

    assert await register_webhook(bot, None) is False
    assert bot.calls == []
