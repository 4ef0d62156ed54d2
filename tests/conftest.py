"""
Shared fixtures.

Environment defaults are set before any hith module reads settings.
"""
import os

os.environ.setdefault("BOT_TOKEN", "123456789:AAtest-token-for-the-webhook-secret")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_TO_FILE", "false")

import json
from typing import Callable, List, Optional

import httpx
import pytest

from hith.core.exceptions import ChannelError
from hith.database import DatabaseConnection, init_tables
from hith.llm.client import CompletionClient
from hith.memory import JournalStore, MessageStore, UserDirectory


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingChannel:
    """ReplyChannel that records everything instead of sending."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[dict] = []
        self.typing: List[int] = []
        self.acknowledged: List[str] = []

    async def send_text(self, chat_id, text, buttons=()):
        if self.fail:
            raise ChannelError("channel down")
        self.sent.append({"chat_id": chat_id, "text": text, "buttons": list(buttons)})

    async def send_typing(self, chat_id):
        if self.fail:
            raise ChannelError("channel down")
        self.typing.append(chat_id)

    async def acknowledge(self, callback_id):
        self.acknowledged.append(callback_id)


class CompletionEndpoint:
    """Scripted chat-completion endpoint behind httpx.MockTransport."""

    def __init__(self, status: int = 200, content: Optional[str] = "Ciao! Un piccolo passo alla volta.",
                 body: Optional[str] = None, payload: Optional[dict] = None):
        self.status = status
        self.content = content
        self.body = body
        self.payload = payload
        self.requests: List[httpx.Request] = []

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status >= 400:
            return httpx.Response(self.status, text=self.body or "error")
        payload = self.payload
        if payload is None:
            payload = {
                "id": "chatcmpl-test",
                "object": "chat.completion",
                "created": 0,
                "model": "test-model",
                "choices": [{
                    "index": 0,
                    "finish_reason": "stop",
                    "message": {"role": "assistant", "content": self.content},
                }],
            }
        return httpx.Response(self.status, json=payload)

    def client(self) -> CompletionClient:
        return CompletionClient(
            api_key="test-key",
            model="test-model",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self)),
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def endpoint() -> CompletionEndpoint:
    return CompletionEndpoint()


@pytest.fixture
async def database(tmp_path):
    db = DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'hith.db'}")
    await init_tables(db)
    yield db
    await db.close()


@pytest.fixture
def users(database) -> UserDirectory:
    return UserDirectory(database)


@pytest.fixture
def store(database) -> MessageStore:
    return MessageStore(database)


@pytest.fixture
def journal(database) -> JournalStore:
    return JournalStore(database)


class FakeDatabase:
    """Stands in for DatabaseConnection where only health and shutdown matter."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.closed = False

    async def check_connection(self) -> bool:
        return self.reachable

    async def close(self) -> None:
        self.closed = True
