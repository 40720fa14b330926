from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import current_app, request

from pastebin.clock import from_epoch_ms
from pastebin.services.paste_store import PasteStore

TEST_NOW_HEADER = "X-Test-Now-Ms"


def get_paste_store() -> PasteStore:
    """Return the PasteStore wired into the current app by ``create_app``."""
    return current_app.extensions["paste_store"]


def request_now() -> Optional[datetime]:
    """
    Instant supplied by the ``X-Test-Now-Ms`` header, or ``None``.

    The header is only honoured when the app runs with ``TEST_MODE``;
    malformed values fall back to the wall clock.
    """

    if not current_app.config.get("TEST_MODE", False):
        return None

    raw = request.headers.get(TEST_NOW_HEADER)
    if not raw:
        return None
    try:
        return from_epoch_ms(int(raw))
    except (ValueError, OverflowError):
        return None
