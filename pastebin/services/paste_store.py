from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from pastebin.backends.base import BackendError, KeyValueBackend
from pastebin.clock import Clock, SystemClock, resolve_now
from pastebin.domain.models import Paste
from pastebin.domain.state_machine import consume_view, evaluate_liveness
from pastebin.ids import generate_paste_id
from pastebin.observability import get_correlation_id
from pastebin.repositories.paste_repository import PasteRepository, ttl_hint


logger = logging.getLogger(__name__)

HEALTH_CHECK_KEY = "__health_check__"


@dataclass
class PasteStore:
    """
    Owns the lifecycle of pastes on top of a key-value backend.

    Inputs are trusted: content, ``ttl_seconds`` and ``max_views`` have been
    validated by the caller.  Expiry is enforced lazily, on every fetch,
    whatever TTL the backend was given.

    Concurrent fetches of the same view-limited paste race: both may read the
    same ``remaining_views`` before either writes its decrement, so a paste
    can be served more times than its limit.  No lock is held across backend
    calls.
    """

    backend: KeyValueBackend
    clock: Clock = field(default_factory=SystemClock)
    id_factory: Callable[[], str] = generate_paste_id

    def __post_init__(self) -> None:
        self._repo = PasteRepository(self.backend)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------
    def create_paste(
        self,
        content: str,
        ttl_seconds: Optional[int] = None,
        max_views: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Store a new paste and return its id.

        ``now`` replaces the clock reading when given.  A backend failure
        propagates as :class:`BackendError`; nothing is retried.
        """
        current = resolve_now(self.clock, now)
        expires_at = None
        if ttl_seconds is not None:
            expires_at = current + timedelta(seconds=ttl_seconds)

        paste = Paste(
            id=self.id_factory(),
            content=content,
            created_at=current,
            expires_at=expires_at,
            remaining_views=max_views,
        )
        self._repo.save(paste, ttl_seconds=ttl_seconds)

        logger.info(
            "Paste created",
            extra={
                "event": "paste_created",
                "paste_id": paste.id,
                "backend": self._repo.backend_name,
                "correlation_id": get_correlation_id(),
            },
        )
        return paste.id

    # -------------------------------------------------------------------------
    # Retrieval / viewing
    # -------------------------------------------------------------------------
    def fetch_paste(
        self,
        paste_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Paste]:
        """
        Fetch a paste for viewing, charging one view when a limit is set.

        Rules:
        - No entry → ``None``
        - ``now`` later than ``expires_at`` → delete, ``None``
        - ``remaining_views`` already 0 → delete, ``None``
        - ``remaining_views`` set → decrement, persist, return the updated paste
        - Otherwise return the paste untouched

        Absent, expired and exhausted pastes are indistinguishable to the
        caller.  Backend read/write failures raise :class:`BackendError`.
        """
        current = resolve_now(self.clock, now)

        logger.info(
            "Paste access attempt",
            extra={
                "event": "paste_access_attempt",
                "paste_id": paste_id,
                "correlation_id": get_correlation_id(),
            },
        )

        paste = self._repo.get(paste_id)
        if paste is None:
            return None

        liveness = evaluate_liveness(paste, current)
        if not liveness.is_live:
            self._repo.remove(paste_id)
            logger.info(
                "Paste expired",
                extra={
                    "event": "paste_auto_expired",
                    "paste_id": paste_id,
                    "reason": liveness.reason.value if liveness.reason else None,
                    "correlation_id": get_correlation_id(),
                },
            )
            return None

        if paste.remaining_views is not None:
            paste = consume_view(paste)
            self._repo.save(paste, ttl_seconds=ttl_hint(paste.expires_at, current))

        logger.info(
            "Paste access successful",
            extra={
                "event": "paste_access_success",
                "paste_id": paste_id,
                "remaining_views": paste.remaining_views,
                "correlation_id": get_correlation_id(),
            },
        )
        return paste

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    def health_check(self) -> bool:
        """Round-trip a short-lived key through the backend."""
        try:
            self.backend.set(HEALTH_CHECK_KEY, "ok", 1)
            return self.backend.get(HEALTH_CHECK_KEY) == "ok"
        except BackendError:
            logger.exception(
                "Backend health check failed",
                extra={
                    "event": "health_check_failed",
                    "backend": self._repo.backend_name,
                    "error_type": "BackendError",
                    "correlation_id": get_correlation_id(),
                },
            )
            return False
