"""Relational key-value storage via SQLAlchemy."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import DateTime, String, Text, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, Session, mapped_column

from pastebin.backends.base import BackendError, KeyValueBackend
from pastebin.clock import Clock, SystemClock, as_utc
from pastebin.db import Base


class KeyValueEntry(Base):
    """One key-value pair persisted via SQLAlchemy."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SqlBackend(KeyValueBackend):
    """
    Key-value backend on top of a single ``kv_entries`` table.

    Owns session lifecycle: creates a session per operation, commits on
    success, rolls back on exception, and closes the session in a finally
    block.  TTL hints are stored in ``expires_at`` and enforced when the entry
    is next read.
    """

    name = "sql"

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock.now() + timedelta(seconds=ttl_seconds)

        session = self._session_factory()
        try:
            session.merge(KeyValueEntry(key=key, value=value, expires_at=expires_at))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise BackendError(f"SQL write failed for {key!r}: {exc}") from exc
        finally:
            session.close()

    def get(self, key: str) -> Optional[str]:
        session = self._session_factory()
        try:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                return None
            if entry.expires_at is not None and as_utc(entry.expires_at) < self._clock.now():
                session.delete(entry)
                session.commit()
                return None
            return entry.value
        except SQLAlchemyError as exc:
            session.rollback()
            raise BackendError(f"SQL read failed for {key!r}: {exc}") from exc
        finally:
            session.close()

    def delete(self, key: str) -> None:
        session = self._session_factory()
        try:
            session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise BackendError(f"SQL delete failed for {key!r}: {exc}") from exc
        finally:
            session.close()
