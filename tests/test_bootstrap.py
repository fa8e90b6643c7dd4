"""Startup wiring and connection logging."""

import logging
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from worklist import db
from worklist.logging_utils import CorrelationFilter, bound_request_id, get_request_id
from worklist.main import create_app
from worklist.repositories.todo_repository import InMemoryTodoRepository, MongoTodoRepository
from worklist.settings import STORAGE_MEMORY, STORAGE_MONGO, Settings


def make_settings(storage: str) -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        mongo_db_name="WorkListDB",
        mongo_collection="todos",
        storage=storage,
        host="127.0.0.1",
        port=8080,
        log_level="INFO",
    )


class FakeAdmin:
    def __init__(self, error=None):
        self.error = error
        self.commands = []

    async def command(self, name):
        self.commands.append(name)
        if self.error is not None:
            raise self.error
        return {"ok": 1}


class FakeDatabase:
    def __init__(self, name):
        self.name = name

    def __getitem__(self, collection_name):
        return SimpleNamespace(name=collection_name)


class FakeMotorClient:
    """Records construction arguments in place of a motor client."""

    instances = []
    ping_error = None

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.admin = FakeAdmin(self.ping_error)
        self.closed = False
        FakeMotorClient.instances.append(self)

    def __getitem__(self, name):
        return FakeDatabase(name)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    FakeMotorClient.instances = []
    FakeMotorClient.ping_error = None
    monkeypatch.setattr(db, "AsyncIOMotorClient", FakeMotorClient)
    yield FakeMotorClient
    db._client = None
    db._database = None


@pytest.mark.asyncio
async def test_init_db_logs_success(fake_client, caplog) -> None:
    assert not db.is_enabled()
    with caplog.at_level(logging.INFO, logger="worklist.db"):
        database = await db.init_db(make_settings(STORAGE_MONGO))

    client = fake_client.instances[0]
    assert client.uri == "mongodb://localhost:27017"
    assert client.kwargs["tz_aware"] is True
    assert isinstance(client.kwargs["event_listeners"][0], db.ConnectionErrorLogger)
    assert client.admin.commands == ["ping"]
    assert database.name == "WorkListDB"
    assert db.get_database() is database
    assert db.is_enabled()
    assert "MongoDB connection established for database WorkListDB" in caplog.text


@pytest.mark.asyncio
async def test_init_db_logs_failure_without_raising(fake_client, caplog) -> None:
    fake_client.ping_error = ServerSelectionTimeoutError("no servers found")
    with caplog.at_level(logging.INFO, logger="worklist.db"):
        database = await db.init_db(make_settings(STORAGE_MONGO))

    assert database.name == "WorkListDB"
    assert db.is_enabled()
    assert "MongoDB connection failed for database WorkListDB" in caplog.text
    assert "no servers found" in caplog.text


@pytest.mark.asyncio
async def test_init_db_is_idempotent(fake_client) -> None:
    first = await db.init_db(make_settings(STORAGE_MONGO))
    second = await db.init_db(make_settings(STORAGE_MONGO))

    assert first is second
    assert len(fake_client.instances) == 1


@pytest.mark.asyncio
async def test_close_db_resets_connection(fake_client, caplog) -> None:
    await db.init_db(make_settings(STORAGE_MONGO))
    client = fake_client.instances[0]

    with caplog.at_level(logging.INFO, logger="worklist.db"):
        await db.close_db()

    assert client.closed
    assert not db.is_enabled()
    with pytest.raises(RuntimeError):
        db.get_database()
    assert "MongoDB client closed" in caplog.text

    await db.close_db()


def test_mongo_storage_opens_and_closes_connection(fake_client) -> None:
    app = create_app(settings=make_settings(STORAGE_MONGO))
    with TestClient(app):
        assert isinstance(app.state.todo_repository, MongoTodoRepository)
        assert db.is_enabled()
    assert fake_client.instances[0].closed
    assert not db.is_enabled()


def test_memory_storage_selected_from_settings() -> None:
    app = create_app(settings=make_settings(STORAGE_MEMORY))
    with TestClient(app) as client:
        assert isinstance(app.state.todo_repository, InMemoryTodoRepository)
        assert client.post("/todos", json={"value": "a"}).status_code == 201
    assert not db.is_enabled()


def test_get_database_requires_init() -> None:
    with pytest.raises(RuntimeError):
        db.get_database()


def test_heartbeat_failure_is_logged(caplog) -> None:
    event = SimpleNamespace(connection_id=("localhost", 27017), reply=ConnectionError("refused"))
    with caplog.at_level(logging.ERROR, logger="worklist.db"):
        db.ConnectionErrorLogger().failed(event)
    assert "MongoDB connection error" in caplog.text
    assert "refused" in caplog.text


def test_correlation_filter_uses_request_id() -> None:
    record = logging.LogRecord("worklist", logging.INFO, __file__, 1, "msg", None, None)
    with bound_request_id("req-42"):
        assert get_request_id() == "req-42"
        CorrelationFilter().filter(record)
    assert record.request_id == "req-42"

    assert get_request_id() is None
    CorrelationFilter().filter(record)
    assert record.request_id == "-"
