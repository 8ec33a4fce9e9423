"""Key/value table holding persisted application state blobs."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StateRecord(SQLModel, table=True):
    """One JSON blob per key (``tasks``, ``theme``)."""

    __tablename__ = "kv_state"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)


__all__ = ["StateRecord"]
