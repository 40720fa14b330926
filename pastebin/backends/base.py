"""Key-value backend contract the paste store is built on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pastebin.errors import BackendError

__all__ = ["BackendError", "KeyValueBackend"]


class KeyValueBackend(ABC):
    """Abstract base for all storage backends.

    Values are opaque strings.  The ``ttl_seconds`` passed to :meth:`set` is
    an eviction hint only; callers must not rely on it for correctness.
    Implementations raise :class:`BackendError` when the underlying storage
    fails or times out.
    """

    name: str = "abstract"

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Create or overwrite the value at ``key``."""
        ...

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...
