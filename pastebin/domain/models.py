from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Paste(BaseModel):
    """
    A stored text record identified by a short token.

    Instances are frozen: ``content`` and the timestamps never change after
    creation, and a consumed view produces a new instance (see
    :func:`pastebin.domain.state_machine.consume_view`).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    remaining_views: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _expiry_after_creation(self) -> "Paste":
        if self.expires_at is not None and self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at.")
        return self
