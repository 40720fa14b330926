from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pastebin import create_app
from pastebin.backends import BackendError, InMemoryBackend, KeyValueBackend
from pastebin.backends.redis_backend import RedisBackend
from pastebin.backends.sql import SqlBackend
from pastebin.db import Base
from pastebin.services.paste_store import PasteStore


T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock frozen at a settable instant."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start
        self.calls = 0

    def now(self) -> datetime:
        self.calls += 1
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


class FakeRedisClient:
    """Dict-backed stand-in for the redis-py client calls RedisBackend makes."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expirations: dict[str, int] = {}

    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        if ex is None:
            self.expirations.pop(key, None)
        else:
            self.expirations[key] = ex
        return True

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def delete(self, key: str) -> int:
        self.expirations.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0


class RecordingBackend(KeyValueBackend):
    """
    Wraps a real backend, remembering every write and delete.

    ``fail_writes`` / ``fail_deletes`` make the matching calls raise
    :class:`BackendError` without reaching the wrapped backend.
    """

    def __init__(self, inner: Optional[KeyValueBackend] = None) -> None:
        self.inner = inner if inner is not None else InMemoryBackend()
        self.name = self.inner.name
        self.writes: list[tuple[str, str, Optional[int]]] = []
        self.deletes: list[str] = []
        self.fail_writes = False
        self.fail_deletes = False

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if self.fail_writes:
            raise BackendError("write refused")
        self.writes.append((key, value, ttl_seconds))
        self.inner.set(key, value, ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        return self.inner.get(key)

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise BackendError("delete refused")
        self.deletes.append(key)
        self.inner.delete(key)


class BrokenBackend(KeyValueBackend):
    """Backend whose every call fails like an unreachable server."""

    name = "broken"

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        raise BackendError("connection refused")

    def get(self, key: str) -> Optional[str]:
        raise BackendError("connection refused")

    def delete(self, key: str) -> None:
        raise BackendError("connection refused")


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(params=["memory", "sql", "redis"])
def backend(request, clock: FakeClock) -> Generator[RecordingBackend, None, None]:
    """
    Every store test runs once per backend: in-memory, SQL on an in-memory
    SQLite engine, and Redis over a dict-backed client.
    """

    if request.param == "memory":
        yield RecordingBackend(InMemoryBackend())
    elif request.param == "sql":
        engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(engine)
        session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
        try:
            yield RecordingBackend(SqlBackend(session_factory=session_factory, clock=clock))
        finally:
            engine.dispose()
    else:
        yield RecordingBackend(RedisBackend(FakeRedisClient()))


@pytest.fixture
def store(backend: RecordingBackend, clock: FakeClock) -> PasteStore:
    return PasteStore(backend=backend, clock=clock)


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """Testing app: in-memory backend and the X-Test-Now-Ms header enabled."""

    app = create_app("testing")
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()
