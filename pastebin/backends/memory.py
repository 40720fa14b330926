"""InMemoryBackend — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Optional

from pastebin.backends.base import KeyValueBackend


class InMemoryBackend(KeyValueBackend):
    """
    In-memory store guarded by a lock.  Data is lost on process exit and is
    not shared between processes.

    TTL hints are honoured lazily: an entry past its deadline is dropped the
    next time it is read.
    """

    name = "memory"

    def __init__(self, monotonic: Callable[[], float] = time.monotonic) -> None:
        self._data: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._monotonic = monotonic

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        deadline = None
        if ttl_seconds is not None:
            deadline = self._monotonic() + ttl_seconds
        with self._lock:
            self._data[key] = (value, deadline)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, deadline = entry
            if deadline is not None and self._monotonic() > deadline:
                del self._data[key]
                return None
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
