"""Startup and shutdown of the FastAPI app."""
import pytest
from fastapi.testclient import TestClient
from telegram.error import InvalidToken, NetworkError

import hith.api.routes.webhook as webhook_routes
import hith.database
import hith.services.channel
from hith.api.main import app
from hith.database.connection import get_database
from tests.conftest import FakeDatabase


class FailingBot:
    def __init__(self):
        self.shutdown_called = False

    async def initialize(self):
        raise NetworkError("api.telegram.org unreachable")

    async def shutdown(self):
        self.shutdown_called = True


class RecordingCompletionClient:
    def __init__(self):
        self.closed = False

    async def close(self):
        self.closed = True


class ServiceWithClient:
    def __init__(self):
        self.completion_client = RecordingCompletionClient()


@pytest.fixture
def fake_database(monkeypatch):
    db = FakeDatabase()
    monkeypatch.setattr(hith.database, "get_database", lambda: db)
    app.dependency_overrides[get_database] = lambda: db
    yield db
    app.dependency_overrides.clear()


@pytest.fixture
def tables_fail(monkeypatch):
    async def init_tables():
        raise RuntimeError("database is down")

    monkeypatch.setattr(hith.database, "init_tables", init_tables)


def test_health_serves_when_bot_initialization_fails(monkeypatch, fake_database, tables_fail):
    bot = FailingBot()
    monkeypatch.setattr(hith.services.channel, "get_bot", lambda: bot)

    with TestClient(app) as client:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["configured"]["webhook_registered"] is False

    assert bot.shutdown_called
    assert fake_database.closed


def test_health_serves_when_bot_cannot_be_created(monkeypatch, fake_database, tables_fail):
    def get_bot():
        raise InvalidToken("rejected token")

    monkeypatch.setattr(hith.services.channel, "get_bot", get_bot)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/").text == "HITH is alive."

    assert fake_database.closed


def test_shutdown_closes_completion_client(monkeypatch, fake_database, tables_fail):
    service = ServiceWithClient()
    monkeypatch.setattr(webhook_routes, "_chat_service", service)
    monkeypatch.setattr(hith.services.channel, "get_bot", lambda: FailingBot())

    with TestClient(app):
        pass

    assert service.completion_client.closed
    assert webhook_routes._chat_service is None


async def test_close_without_service_is_a_no_op(monkeypatch):
    monkeypatch.setattr(webhook_routes, "_chat_service", None)

    await webhook_routes.close_chat_service()

    assert webhook_routes._chat_service is None
