from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..db import Database, PersistedState, init_db, transaction_scope

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return format(value, "f")
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    return str(value)


def _normalize_json(payload: Any) -> Any:
    if payload is None:
        return None
    return json.loads(json.dumps(payload, ensure_ascii=False, default=_json_default))


class StatePersistence:
    """Persist one JSON document per store slice in the local state database.

    Storage failures are logged and swallowed: a store must keep working
    in memory when its backing file is unavailable.
    """

    def __init__(self, database: Database, namespace: str = "trustay") -> None:
        self.database = database
        self.namespace = namespace
        init_db(database)

    def key_for(self, name: str) -> str:
        return f"{self.namespace}:{name}"

    def save(self, name: str, state: dict[str, Any]) -> bool:
        if not isinstance(state, dict):
            raise ValueError("Persisted state must be a dictionary")
        payload = _normalize_json(state)
        key = self.key_for(name)
        try:
            with transaction_scope(self.database) as session:
                record = session.get(PersistedState, key)
                if record is None:
                    record = PersistedState(key=key)
                record.payload = payload
                record.updated_at = datetime.now(timezone.utc)
                session.add(record)
        except SQLAlchemyError as exc:
            logger.warning("Failed to persist %s: %s", key, exc)
            return False
        return True

    def load(self, name: str) -> Optional[dict[str, Any]]:
        key = self.key_for(name)
        try:
            with transaction_scope(self.database) as session:
                record = session.get(PersistedState, key)
                payload = record.payload if record is not None else None
        except SQLAlchemyError as exc:
            logger.warning("Failed to restore %s: %s", key, exc)
            return None
        return payload if isinstance(payload, dict) else None

    def clear(self, name: str) -> bool:
        key = self.key_for(name)
        try:
            with transaction_scope(self.database) as session:
                record = session.get(PersistedState, key)
                if record is None:
                    return False
                session.delete(record)
        except SQLAlchemyError as exc:
            logger.warning("Failed to clear %s: %s", key, exc)
            return False
        return True


__all__ = ["StatePersistence"]
