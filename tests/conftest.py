from contextlib import contextmanager

import fakeredis
import redis
import pytest

from lifecycle import ConnectionLifecycleHandler
from registry import RoomRegistry


class RecordingConnection:
    """Stand-in for a transport channel that records everything delivered to it."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        self.is_open = True
        self.sent = []
        self._close_handled = False

    def enqueue(self, message: dict) -> bool:
        self.sent.append(message)
        return True

    def mark_closed(self) -> bool:
        self.is_open = False
        if self._close_handled:
            return False
        self._close_handled = True
        return True

    def of_type(self, kind: str):
        return [m for m in self.sent if m.get("type") == kind]


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def handler(registry):
    return ConnectionLifecycleHandler(registry)


@pytest.fixture
def make_connection():
    counter = iter(range(1, 10_000))

    def factory(name: str = None) -> RecordingConnection:
        return RecordingConnection(name or f"conn-{next(counter)}")

    return factory


@pytest.fixture
def fake_redis(monkeypatch):
    import backend

    client = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(backend.clip_backend, "redis_client", client)
    return client


@pytest.fixture
def offline_redis(monkeypatch):
    import backend

    # Nothing listens on port 1, so every command fails with a ConnectionError
    client = redis.Redis(host="127.0.0.1", port=1, socket_connect_timeout=0.2, decode_responses=True)
    monkeypatch.setattr(backend.clip_backend, "redis_client", client)
    return client


@contextmanager
def running_app(monkeypatch):
    from fastapi.testclient import TestClient

    import app as app_module
    import routers.status as status_module

    fresh_registry = RoomRegistry()
    fresh_handler = ConnectionLifecycleHandler(fresh_registry)
    monkeypatch.setattr(app_module, "lifecycle_handler", fresh_handler)
    monkeypatch.setattr(app_module.reclaim_scheduler, "registry", fresh_registry)
    monkeypatch.setattr(status_module, "room_registry", fresh_registry)
    monkeypatch.setattr(status_module, "lifecycle_handler", fresh_handler)

    with TestClient(app_module.app) as test_client:
        test_client.registry = fresh_registry
        yield test_client


@pytest.fixture
def client(monkeypatch, fake_redis):
    with running_app(monkeypatch) as test_client:
        yield test_client


@pytest.fixture
def offline_client(monkeypatch, offline_redis):
    with running_app(monkeypatch) as test_client:
        yield test_client
