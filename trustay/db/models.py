from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersistedState(Base):
    """One JSON document per store slice, keyed as ``{namespace}:{store}``."""

    __tablename__ = "persisted_state"

    key = Column(String, primary_key=True)
    payload = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


__all__ = ["PersistedState"]
