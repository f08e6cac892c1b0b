from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, ClassVar, Optional, Tuple, Type

from ..api.errors import extract_error_message
from ..api.result import ApiFailure, ApiResult
from ..log import log_store_action
from .detail import DetailSlot
from .guard import RequestGuard
from .paginated import PageFetcher, PaginatedList
from .persistence import StatePersistence

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EntityStore:
    """Base for store slices: change notification, persistence and mutations.

    Subclasses declare ``name`` and the ``persisted_fields`` that survive a
    restart. Loading flags and errors are never persisted.
    """

    name: ClassVar[str] = "store"
    persisted_fields: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, *, persistence: Optional[StatePersistence] = None) -> None:
        self.guard = RequestGuard()
        self._persistence = persistence
        self._listeners: list[Listener] = []
        self._restoring = False
        self.submitting = False
        self.submit_error: Optional[str] = None

    def _list(
        self,
        slot: str,
        model: Type[Any],
        fetch: PageFetcher,
        *,
        fallback: str,
        on_page: Optional[Callable[[Any], None]] = None,
    ) -> PaginatedList:
        return PaginatedList(
            slot,
            model,
            fetch,
            guard=self.guard,
            on_change=self._notify,
            on_page=on_page,
            store_name=self.name,
            fallback=fallback,
        )

    def _detail(self, slot: str, model: Optional[Type[Any]] = None, *, fallback: str) -> DetailSlot:
        return DetailSlot(
            slot,
            model,
            guard=self.guard,
            on_change=self._notify,
            store_name=self.name,
            fallback=fallback,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if self._restoring:
            return
        self._persist()
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener failed for %s", self.name)

    # Persistence

    def snapshot(self) -> dict[str, Any]:
        state: dict[str, Any] = {}
        for field_name in self.persisted_fields:
            value = getattr(self, field_name)
            state[field_name] = value.dump() if hasattr(value, "dump") else value
        return state

    def _persist(self) -> None:
        if self._persistence is None or not self.persisted_fields:
            return
        self._persistence.save(self.name, self.snapshot())

    def restore(self) -> bool:
        """Reload the persisted subset; call once the slots exist."""
        if self._persistence is None or not self.persisted_fields:
            return False
        state = self._persistence.load(self.name)
        if not state:
            return False
        self._restoring = True
        try:
            for field_name in self.persisted_fields:
                if field_name not in state:
                    continue
                current = getattr(self, field_name)
                if hasattr(current, "restore"):
                    current.restore(state[field_name])
                else:
                    setattr(self, field_name, state[field_name])
        except ValueError as exc:
            logger.warning("Discarding unreadable persisted state for %s: %s", self.name, exc)
            return False
        finally:
            self._restoring = False
        return True

    # Errors

    def clear_errors(self) -> None:
        for value in vars(self).values():
            if isinstance(value, (PaginatedList, DetailSlot)):
                value.clear_error()
        self.submit_error = None
        self._notify()

    def clear_form_errors(self) -> None:
        self.submit_error = None
        self._notify()

    # Mutations

    async def _mutate(
        self,
        action: str,
        call: Callable[[], Awaitable[ApiResult[Any]]],
        *,
        apply: Optional[Callable[[Any], None]] = None,
        fallback: str = "Request failed",
        track: bool = True,
    ) -> ApiResult[Any]:
        """Run a remote mutation, then mirror it locally only if it succeeded."""
        if track:
            self.submitting = True
            self.submit_error = None
            self._notify()
        try:
            result = await call()
        except asyncio.CancelledError:
            if track:
                self.submitting = False
                self._notify()
            raise
        except Exception as exc:
            logger.exception("Unexpected failure during %s.%s", self.name, action)
            result = ApiFailure(error=extract_error_message(exc, fallback))

        if track:
            self.submitting = False
        if not result.success:
            if track:
                self.submit_error = result.error
            self._notify()
            log_store_action(self.name, action, "failed", error=result.error, status=result.status)
            return result

        if apply is not None:
            apply(result.data)
        self._notify()
        log_store_action(self.name, action, "applied")
        return result


__all__ = ["EntityStore", "Listener"]
