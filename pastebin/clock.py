"""Clock abstraction for time-dependent paste logic."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Clock(Protocol):
    """Anything that can report the current instant.  Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones pass through unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_now(clock: Clock, override: Optional[datetime] = None) -> datetime:
    """
    Return ``override`` when given, otherwise ask ``clock``.

    The override keeps its exact instant; a naive value is read as UTC.
    Nothing is cached between calls: an absent override always means a fresh
    clock reading.
    """

    if override is not None:
        return as_utc(override)
    return as_utc(clock.now())


def from_epoch_ms(value: int) -> datetime:
    """Convert integer epoch milliseconds into an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=value)


def to_epoch_ms(value: datetime) -> int:
    """Convert a datetime into integer epoch milliseconds (naive means UTC)."""
    return (as_utc(value) - EPOCH) // timedelta(milliseconds=1)
