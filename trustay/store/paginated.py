from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from ..api.errors import extract_error_message
from ..api.result import ApiFailure, ApiResult
from ..log import log_store_action
from ..schemas.pagination import ListPage, PaginationMeta
from .guard import RequestGuard, Ticket, current_task, request_key
from .state import RequestState

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

PageFetcher = Callable[[Any], Awaitable[ApiResult[ListPage[T]]]]


def requested_page(params: Any) -> int:
    if params is None:
        return 1
    if isinstance(params, Mapping):
        value = params.get("page")
    else:
        value = getattr(params, "page", None)
    try:
        return int(value) if value is not None else 1
    except (TypeError, ValueError):
        return 1


def swallow_cancellation() -> None:
    """Undo the cancellation request a superseded task received from the guard."""
    task = current_task()
    if task is not None and hasattr(task, "uncancel"):
        task.uncancel()


class PaginatedList(Generic[T]):
    """One list slice: items, pagination cursor and request flags.

    ``search`` either replaces the collection with a fresh page or appends
    the next page to its tail. Failed requests leave the collection as it
    was; superseded requests never touch it.
    """

    def __init__(
        self,
        name: str,
        model: Type[T],
        fetch: PageFetcher,
        *,
        guard: Optional[RequestGuard] = None,
        on_change: Optional[Callable[[], None]] = None,
        on_page: Optional[Callable[[ListPage[T]], None]] = None,
        store_name: str = "store",
        fallback: str = "Failed to load data",
    ) -> None:
        self.name = name
        self.model = model
        self._fetch = fetch
        self._on_page = on_page
        self._guard = guard or RequestGuard()
        self._on_change = on_change
        self._store_name = store_name
        self._fallback = fallback
        self.items: List[T] = []
        self.meta: Optional[PaginationMeta] = None
        self.state = RequestState()

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def loading_more(self) -> bool:
        return self.state.loading_more

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def has_next(self) -> bool:
        return bool(self.meta and self.meta.has_next)

    def __len__(self) -> int:
        return len(self.items)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _log(self, outcome: str, **data: Any) -> None:
        log_store_action(self._store_name, self.name, outcome, **data)

    def _append_blocked(self, page: int) -> Optional[str]:
        if self.state.loading:
            return "replace in progress"
        if self.state.loading_more:
            return "append in progress"
        if self.meta is not None and page <= self.meta.page:
            return "page already loaded"
        return None

    async def search(self, params: Any = None, *, append: bool = False, force: bool = False) -> bool:
        """Fetch one page. Returns ``True`` when the response was applied."""
        page = requested_page(params)
        if append:
            reason = self._append_blocked(page)
            if reason:
                self._log("skipped", page=page, reason=reason)
                return False

        ticket = self._guard.begin(self.name, request_key(params), append=append, force=force)
        if ticket is None:
            self._log("skipped", page=page, reason="duplicate request")
            return False

        self.state.start(append=append)
        self._changed()

        try:
            result = await self._fetch(params)
        except asyncio.CancelledError:
            if self._guard.is_current(ticket):
                self._guard.settle(ticket, False)
                self.state.reset()
                self._changed()
                raise
            swallow_cancellation()
            self._log("stale", page=page, reason="cancelled")
            return False
        except Exception as exc:
            logger.exception("Unexpected failure while loading %s", self.name)
            result = ApiFailure(error=extract_error_message(exc, self._fallback))

        return self._settle(ticket, result, page)

    def _settle(self, ticket: Ticket, result: ApiResult[ListPage[T]], page: int) -> bool:
        if not self._guard.is_current(ticket):
            self._log("stale", page=page)
            return False

        self._guard.settle(ticket, result.success)
        if not result.success:
            self.state.fail(result.error)
            self._changed()
            self._log("failed", page=page, error=result.error, status=result.status)
            return False

        incoming: ListPage[T] = result.data
        if ticket.append:
            self.items = self.items + list(incoming.data)
            self.meta = self.meta.advance(incoming.meta) if self.meta is not None else incoming.meta
        else:
            self.items = list(incoming.data)
            self.meta = incoming.meta
        if self._on_page is not None:
            self._on_page(incoming)
        self.state.succeed()
        self._changed()
        self._log("applied", page=page, append=ticket.append, count=len(incoming.data), total=len(self.items))
        return True

    def find(self, item_id: str) -> Optional[T]:
        for item in self.items:
            if getattr(item, "id", None) == item_id:
                return item
        return None

    def prepend(self, item: T) -> None:
        self.items = [item] + self.items
        self._changed()

    def replace_by_id(self, item_id: str, item: T) -> bool:
        replaced = False
        updated: List[T] = []
        for existing in self.items:
            if getattr(existing, "id", None) == item_id:
                updated.append(item)
                replaced = True
            else:
                updated.append(existing)
        if replaced:
            self.items = updated
            self._changed()
        return replaced

    def patch_by_id(self, item_id: str, **fields: Any) -> bool:
        current = self.find(item_id)
        if current is None:
            return False
        return self.replace_by_id(item_id, current.model_copy(update=fields))

    def remove_by_id(self, item_id: str) -> bool:
        remaining = [item for item in self.items if getattr(item, "id", None) != item_id]
        if len(remaining) == len(self.items):
            return False
        self.items = remaining
        self._changed()
        return True

    def clear_error(self) -> None:
        self.state.error = None

    def clear(self) -> None:
        self._guard.reset(self.name)
        self.items = []
        self.meta = None
        self.state.reset()
        self._changed()

    def dump(self) -> dict[str, Any]:
        return {
            "items": [item.model_dump(mode="json", by_alias=True) for item in self.items],
            "meta": self.meta.model_dump(mode="json", by_alias=True) if self.meta is not None else None,
        }

    def restore(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            return
        self.items = [self.model.model_validate(item) for item in payload.get("items") or []]
        meta = payload.get("meta")
        self.meta = PaginationMeta.model_validate(meta) if isinstance(meta, Mapping) else None


__all__ = ["PaginatedList", "PageFetcher", "requested_page"]
