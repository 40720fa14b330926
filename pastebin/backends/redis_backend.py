"""Redis-backed storage for multi-process deployments."""

from __future__ import annotations

from typing import Any, Optional

import redis

from pastebin.backends.base import BackendError, KeyValueBackend


class RedisBackend(KeyValueBackend):
    """
    Stores values in Redis with ``SET``/``GET``/``DEL``.

    TTL hints become ``EX`` on the write so Redis evicts expired pastes
    eagerly.  Every ``redis.RedisError`` (connection refused, timeout, ...)
    is re-raised as :class:`BackendError`.
    """

    name = "redis"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float | None = None) -> "RedisBackend":
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            decode_responses=True,
        )
        return cls(client)

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        try:
            if ttl_seconds is not None:
                self._client.set(key, value, ex=max(int(ttl_seconds), 1))
            else:
                self._client.set(key, value)
        except redis.RedisError as exc:
            raise BackendError(f"Redis SET failed for {key!r}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            raise BackendError(f"Redis GET failed for {key!r}: {exc}") from exc
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise BackendError(f"Redis DEL failed for {key!r}: {exc}") from exc
