from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pastebin.backends.base import BackendError, KeyValueBackend
from pastebin.backends.memory import InMemoryBackend

__all__ = ["BackendError", "KeyValueBackend", "InMemoryBackend", "build_backend"]


def build_backend(config: Mapping[str, Any]) -> KeyValueBackend:
    """
    Build the key-value backend named by ``config['KV_BACKEND']``.

    ``sql`` expects ``init_db(app)`` to have configured ``SessionLocal``.
    """

    kind = (config.get("KV_BACKEND") or "memory").lower()

    if kind == "memory":
        return InMemoryBackend()

    if kind == "redis":
        from pastebin.backends.redis_backend import RedisBackend

        return RedisBackend.from_url(
            config["REDIS_URL"],
            socket_timeout=config.get("REDIS_SOCKET_TIMEOUT"),
        )

    if kind == "sql":
        from pastebin.backends.sql import SqlBackend
        from pastebin.db import SessionLocal

        return SqlBackend(session_factory=SessionLocal)

    raise ValueError(f"Unknown KV_BACKEND {kind!r}. Valid backends: memory, redis, sql")
