from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, Type, TypeVar

from ..api.errors import extract_error_message
from ..api.result import ApiFailure, ApiResult
from ..log import log_store_action
from .guard import RequestGuard
from .paginated import swallow_cancellation
from .state import RequestState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DetailSlot(Generic[T]):
    """A single currently viewed value with its own loading/error flags."""

    def __init__(
        self,
        name: str,
        model: Optional[Type[Any]] = None,
        *,
        guard: Optional[RequestGuard] = None,
        on_change: Optional[Callable[[], None]] = None,
        store_name: str = "store",
        fallback: str = "Failed to load data",
    ) -> None:
        self.name = name
        self.model = model
        self._guard = guard or RequestGuard()
        self._on_change = on_change
        self._store_name = store_name
        self._fallback = fallback
        self.record: Optional[T] = None
        self.state = RequestState()

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def load(self, key: Any, fetch: Callable[[], Awaitable[ApiResult[T]]]) -> bool:
        """Fetch and store the record identified by ``key``.

        Reloading a key that already settled is allowed; a second call for
        the key currently in flight is skipped.
        """
        slot_key = str(key)
        if self._guard.slot(self.name).inflight_key == slot_key:
            log_store_action(self._store_name, self.name, "skipped", key=slot_key, reason="duplicate request")
            return False
        ticket = self._guard.begin(self.name, slot_key, force=True)
        self.state.start()
        self._changed()

        try:
            result = await fetch()
        except asyncio.CancelledError:
            if self._guard.is_current(ticket):
                self._guard.settle(ticket, False)
                self.state.reset()
                self._changed()
                raise
            swallow_cancellation()
            log_store_action(self._store_name, self.name, "stale", key=slot_key, reason="cancelled")
            return False
        except Exception as exc:
            logger.exception("Unexpected failure while loading %s", self.name)
            result = ApiFailure(error=extract_error_message(exc, self._fallback))

        if not self._guard.is_current(ticket):
            log_store_action(self._store_name, self.name, "stale", key=slot_key)
            return False
        self._guard.settle(ticket, result.success)
        if not result.success:
            self.state.fail(result.error)
            self._changed()
            log_store_action(self._store_name, self.name, "failed", key=slot_key, error=result.error)
            return False

        self.record = result.data
        self.state.succeed()
        self._changed()
        log_store_action(self._store_name, self.name, "applied", key=slot_key)
        return True

    def set(self, record: Optional[T]) -> None:
        self.record = record
        self._changed()

    def matches(self, item_id: str) -> bool:
        return self.record is not None and getattr(self.record, "id", None) == item_id

    def patch(self, **fields: Any) -> bool:
        if self.record is None or not hasattr(self.record, "model_copy"):
            return False
        self.record = self.record.model_copy(update=fields)
        self._changed()
        return True

    def clear_error(self) -> None:
        self.state.error = None

    def clear(self) -> None:
        self._guard.reset(self.name)
        self.record = None
        self.state.reset()
        self._changed()

    def dump(self) -> Any:
        record = self.record
        if record is None:
            return None
        if hasattr(record, "model_dump"):
            return record.model_dump(mode="json", by_alias=True)
        if isinstance(record, list):
            return [item.model_dump(mode="json", by_alias=True) if hasattr(item, "model_dump") else item for item in record]
        return record

    def restore(self, payload: Any) -> None:
        if payload is None:
            self.record = None
            return
        if self.model is None:
            self.record = payload
        elif isinstance(payload, list):
            self.record = [self.model.model_validate(item) for item in payload]
        else:
            self.record = self.model.model_validate(payload)


__all__ = ["DetailSlot"]
