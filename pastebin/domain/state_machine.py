from __future__ import annotations

import enum
from datetime import datetime
from typing import NamedTuple, Optional

from .models import Paste


class PasteState(str, enum.Enum):
    LIVE = "LIVE"
    EXPIRED = "EXPIRED"


class ExpiryReason(str, enum.Enum):
    TIME = "time"
    VIEWS = "views"


class Liveness(NamedTuple):
    state: PasteState
    reason: Optional[ExpiryReason] = None

    @property
    def is_live(self) -> bool:
        return self.state is PasteState.LIVE


class ViewLimitExhausted(Exception):
    """Raised when consuming a view of a paste that has none left."""


def evaluate_liveness(paste: Paste, now: datetime) -> Liveness:
    """
    Classify ``paste`` as LIVE or EXPIRED at instant ``now``.

    - Time: expired once ``now`` is strictly later than ``expires_at``;
      ``now == expires_at`` is still live.
    - Views: expired when ``remaining_views`` is already 0, checked before
      any decrement.
    - Time is checked first, so a paste failing both reports ``TIME``.
    """

    if paste.expires_at is not None and now > paste.expires_at:
        return Liveness(PasteState.EXPIRED, ExpiryReason.TIME)
    if paste.remaining_views is not None and paste.remaining_views <= 0:
        return Liveness(PasteState.EXPIRED, ExpiryReason.VIEWS)
    return Liveness(PasteState.LIVE)


def consume_view(paste: Paste) -> Paste:
    """
    Return ``paste`` after charging one view.

    Pastes without a view limit come back unchanged.  The result may carry
    ``remaining_views == 0``: that was the last permitted view and the next
    evaluation reports the paste EXPIRED.
    """

    if paste.remaining_views is None:
        return paste
    if paste.remaining_views <= 0:
        raise ViewLimitExhausted(f"Paste {paste.id} has no views left.")
    return paste.model_copy(update={"remaining_views": paste.remaining_views - 1})
