from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from typing import Any, Optional

from pastebin.backends.base import BackendError, KeyValueBackend
from pastebin.clock import from_epoch_ms, to_epoch_ms
from pastebin.domain.models import Paste
from pastebin.observability import get_correlation_id


logger = logging.getLogger(__name__)

KEY_PREFIX = "paste:"


def paste_key(paste_id: str) -> str:
    return f"{KEY_PREFIX}{paste_id}"


def encode_paste(paste: Paste) -> str:
    """
    Serialize a Paste to the JSON value stored in the backend.

    The id is the key and is not repeated in the value.  Instants are integer
    epoch milliseconds; ``null`` means "no limit".
    """

    data: dict[str, Any] = {
        "content": paste.content,
        "created_at": to_epoch_ms(paste.created_at),
        "expires_at": None if paste.expires_at is None else to_epoch_ms(paste.expires_at),
        "remaining_views": paste.remaining_views,
    }
    return json.dumps(data, ensure_ascii=False)


def decode_paste(paste_id: str, raw: str) -> Paste:
    """Inverse of :func:`encode_paste`."""

    data = json.loads(raw)
    expires_at = data.get("expires_at")
    return Paste(
        id=paste_id,
        content=data["content"],
        created_at=from_epoch_ms(data["created_at"]),
        expires_at=None if expires_at is None else from_epoch_ms(expires_at),
        remaining_views=data.get("remaining_views"),
    )


class PasteRepository:
    """
    Repository for Paste records.

    All backend interaction for pastes should go through this class.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    @property
    def backend_name(self) -> str:
        return self._backend.name

    def save(self, paste: Paste, *, ttl_seconds: Optional[int] = None) -> None:
        """Write the full record, overwriting whatever is stored under its id."""

        self._backend.set(paste_key(paste.id), encode_paste(paste), ttl_seconds)

    def get(self, paste_id: str) -> Optional[Paste]:
        """Return the stored Paste, or ``None`` if the backend has no entry."""

        raw = self._backend.get(paste_key(paste_id))
        if raw is None:
            return None
        return decode_paste(paste_id, raw)

    def remove(self, paste_id: str) -> bool:
        """
        Best-effort delete.

        Returns ``False`` (after logging) if the backend refused; the caller's
        outcome does not depend on it.
        """

        try:
            self._backend.delete(paste_key(paste_id))
        except BackendError:
            logger.warning(
                "Failed to delete paste from backend",
                exc_info=True,
                extra={
                    "event": "paste_delete_failed",
                    "paste_id": paste_id,
                    "backend": self._backend.name,
                    "error_type": "BackendError",
                    "correlation_id": get_correlation_id(),
                },
            )
            return False
        return True


def ttl_hint(expires_at: Optional[datetime], now: datetime) -> Optional[int]:
    """
    Whole seconds until ``expires_at`` (rounded up, at least 1), for use as a
    backend eviction hint on rewrites.
    """

    if expires_at is None:
        return None
    remaining = (expires_at - now).total_seconds()
    return max(1, math.ceil(remaining))
