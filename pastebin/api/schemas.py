from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

from pastebin.domain.models import Paste


class PasteCreateRequest(BaseModel):
    content: StrictStr = Field(..., description="Paste content")
    ttl_seconds: Optional[StrictInt] = Field(
        default=None,
        ge=1,
        description="Optional time-to-live in seconds (>= 1)",
    )
    max_views: Optional[StrictInt] = Field(
        default=None,
        ge=1,
        description="Optional maximum allowed views (>= 1)",
    )

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content cannot be empty")
        return value


class PasteCreatedResponse(BaseModel):
    id: str
    url: str


class PasteViewResponse(BaseModel):
    content: str
    remaining_views: Optional[int]
    expires_at: Optional[datetime]

    @classmethod
    def from_paste(cls, paste: Paste) -> "PasteViewResponse":
        return cls(
            content=paste.content,
            remaining_views=paste.remaining_views,
            expires_at=paste.expires_at,
        )


class HealthResponse(BaseModel):
    ok: bool = True
