"""End-to-end tests for the conversation pipeline."""
import pytest

from hith.core.exceptions import LLMRequestError, StoreError
from hith.core.language import FALLBACK_MESSAGES, SUGGESTION_LABELS, WELCOME_MESSAGES
from hith.core.rate_limiter import RateLimiter
from hith.models.chat import ButtonActivation, InboundTextMessage
from hith.services.chat_service import ChatService, Outcome
from hith.services.reply_dispatcher import ReplyDispatcher

from tests.conftest import CompletionEndpoint, RecordingChannel


def make_service(channel, users, store, endpoint, clock):
    return ChatService(
        ReplyDispatcher(channel),
        rate_limiter=RateLimiter(cooldown_seconds=5, clock=clock),
        user_directory=users,
        message_store=store,
        completion_client=endpoint.client(),
    )


def text_event(text="Ciao", user_id=42, locale_hint="it-IT", display_name="Giulia"):
    return InboundTextMessage(
        user_id=user_id,
        chat_id=user_id,
        text=text,
        locale_hint=locale_hint,
        display_name=display_name,
    )


class FailingUsers:
    async def ensure_user(self, user_id, language, display_name=None):
        raise StoreError("ensure_user", "database is down")


@pytest.fixture
def service(channel, users, store, endpoint, clock):
    return make_service(channel, users, store, endpoint, clock)


async def test_italian_user_end_to_end(service, channel, users, store, endpoint):
    result = await service.handle_text_message(text_event())

    assert result.outcome is Outcome.REPLIED
    assert result.language == "it"

    user = await users.get_user(42)
    assert (user.id, user.language, user.display_name) == (42, "it", "Giulia")

    # The prompt: persona, history window (which includes the saved turn), new text
    sent = endpoint.last_json
    assert sent["temperature"] == 0.5
    messages = sent["messages"]
    assert messages[0]["role"] == "system"
    assert messages[0]["content"].endswith("User language: it")
    assert messages[1:-1] == [{"role": "user", "content": "Ciao"}]
    assert messages[-1] == {"role": "user", "content": "Ciao"}

    assert await store.recent_history(42, 8) == [
        {"role": "user", "content": "Ciao"},
        {"role": "assistant", "content": "Ciao! Un piccolo passo alla volta."},
    ]

    reply = channel.sent[-1]
    assert reply["text"] == "Ciao! Un piccolo passo alla volta."
    assert [label for label, _ in reply["buttons"]] == list(SUGGESTION_LABELS["it"][:4])
    assert channel.typing == [42]


async def test_burst_is_dropped_silently(service, channel, store, endpoint, clock):
    first = await service.handle_text_message(text_event("one"))
    clock.advance(2)
    second = await service.handle_text_message(text_event("two"))

    assert first.outcome is Outcome.REPLIED
    assert second.outcome is Outcome.DROPPED
    assert len(channel.sent) == 1
    assert len(endpoint.requests) == 1
    assert [m["content"] for m in await store.recent_history(42, 10)] == [
        "one", "Ciao! Un piccolo passo alla volta.",
    ]

    clock.advance(3)  # 5s after the first message
    third = await service.handle_text_message(text_event("three"))

    assert third.outcome is Outcome.REPLIED
    assert len(channel.sent) == 2


async def test_history_window_is_bounded(channel, users, store, endpoint, clock):
    service = ChatService(
        ReplyDispatcher(channel),
        rate_limiter=RateLimiter(cooldown_seconds=5, clock=clock),
        user_directory=users,
        message_store=store,
        completion_client=endpoint.client(),
        history_limit=3,
    )
    await users.ensure_user(42, "en")
    for i in range(6):
        await store.append(42, "user", f"old {i}")

    await service.handle_text_message(text_event("new", locale_hint="en"))

    messages = endpoint.last_json["messages"]
    assert [m["content"] for m in messages[1:-1]] == ["old 4", "old 5", "new"]


async def test_completion_failure_sends_localized_fallback(channel, users, store, clock):
    endpoint = CompletionEndpoint(status=503, body="service unavailable")
    service = make_service(channel, users, store, endpoint, clock)

    result = await service.handle_text_message(text_event(locale_hint="de-DE"))

    assert result.outcome is Outcome.FALLBACK
    assert isinstance(result.error, LLMRequestError)
    assert result.error.status == 503
    assert result.error.body == "service unavailable"
    assert channel.sent[-1] == {"chat_id": 42, "text": FALLBACK_MESSAGES["de"], "buttons": []}

    # The user turn was stored, no assistant turn
    assert await store.recent_history(42, 8) == [{"role": "user", "content": "Ciao"}]


async def test_store_failure_sends_fallback_without_calling_model(channel, store, endpoint, clock):
    service = make_service(channel, FailingUsers(), store, endpoint, clock)

    result = await service.handle_text_message(text_event())

    assert result.outcome is Outcome.FALLBACK
    assert isinstance(result.error, StoreError)
    assert not isinstance(result.error, LLMRequestError)
    assert endpoint.requests == []
    assert channel.sent[-1]["text"] == FALLBACK_MESSAGES["it"]


async def test_failed_history_read_continues_without_history(channel, users, store, endpoint, clock, monkeypatch):
    async def broken_history(user_id, limit):
        raise StoreError("recent_history", "read timeout")

    monkeypatch.setattr(store, "recent_history", broken_history)
    service = make_service(channel, users, store, endpoint, clock)

    result = await service.handle_text_message(text_event())

    assert result.outcome is Outcome.REPLIED
    roles = [m["role"] for m in endpoint.last_json["messages"]]
    assert roles == ["system", "user"]


async def test_pipeline_survives_failures(channel, users, store, clock):
    endpoint = CompletionEndpoint(status=500, body="boom")
    service = make_service(channel, users, store, endpoint, clock)

    assert (await service.handle_text_message(text_event())).outcome is Outcome.FALLBACK

    endpoint.status = 200
    clock.advance(5)
    assert (await service.handle_text_message(text_event())).outcome is Outcome.REPLIED


async def test_undeliverable_reply_is_reported(users, store, endpoint, clock):
    channel = RecordingChannel(fail=True)
    service = make_service(channel, users, store, endpoint, clock)

    result = await service.handle_text_message(text_event())

    assert result.outcome is Outcome.FALLBACK
    assert result.error.error_code == "channel_error"


async def test_welcome_registers_user_and_greets(service, channel, users, store):
    text = await service.welcome(text_event("/start", locale_hint="de"))

    assert text == WELCOME_MESSAGES["de"]
    assert (await users.get_user(42)).language == "de"
    assert channel.sent[-1]["text"] == WELCOME_MESSAGES["de"]
    assert len(channel.sent[-1]["buttons"]) == 4
    assert await store.recent_history(42, 8) == []


async def test_button_press_echoes_label(service, channel, endpoint):
    label = await service.handle_button(
        ButtonActivation(user_id=42, chat_id=42, payload="sugg_0_Journal", callback_id="cb")
    )

    assert label == "Journal"
    assert channel.sent[-1]["text"] == "→ Journal"
    assert endpoint.requests == []
