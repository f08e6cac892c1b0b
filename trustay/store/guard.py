"""In-flight request de-duplication for store slices.

Each logical operation of a store ("search", "my-posts", "detail", ...) owns
one slot. A slot remembers the key of the request in flight, the key of the
last request that completed successfully, and a generation number that is
bumped for every request actually issued. Responses are applied only while
their generation is still the slot's latest; a newer request cancels the
task of the one it supersedes.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


def current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def request_key(params: Any) -> str:
    """Canonical fingerprint of a parameter object: sorted keys, no ``None`` values."""
    if params is None:
        return "{}"
    if hasattr(params, "model_dump"):
        params = params.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(params, Mapping):
        params = {key: value for key, value in params.items() if value is not None}
    return json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class Ticket:
    slot: str
    key: str
    generation: int
    append: bool = False


@dataclass
class GuardSlot:
    inflight_key: Optional[str] = None
    last_completed_key: Optional[str] = None
    generation: int = 0
    task: Optional[asyncio.Task] = field(default=None, repr=False)


class RequestGuard:
    def __init__(self) -> None:
        self._slots: dict[str, GuardSlot] = {}

    def slot(self, name: str) -> GuardSlot:
        slot = self._slots.get(name)
        if slot is None:
            slot = GuardSlot()
            self._slots[name] = slot
        return slot

    def begin(self, name: str, key: str, *, append: bool = False, force: bool = False) -> Optional[Ticket]:
        """Register a request, or return ``None`` when it must not be issued.

        A replace whose key matches the in-flight or the last successful
        request is a no-op unless ``force`` is set.
        """
        slot = self.slot(name)
        if not append and not force and key in (slot.inflight_key, slot.last_completed_key):
            return None

        previous = slot.task
        current = current_task()
        if previous is not None and previous is not current and not previous.done():
            logger.debug("Cancelling superseded request on slot %s", name)
            previous.cancel()

        slot.generation += 1
        slot.inflight_key = key
        # Only the latest settled request counts as completed.
        slot.last_completed_key = None
        slot.task = current
        return Ticket(slot=name, key=key, generation=slot.generation, append=append)

    def is_current(self, ticket: Ticket) -> bool:
        return self.slot(ticket.slot).generation == ticket.generation

    def settle(self, ticket: Ticket, success: bool) -> None:
        slot = self.slot(ticket.slot)
        if slot.generation != ticket.generation:
            return
        slot.inflight_key = None
        slot.task = None
        if success:
            slot.last_completed_key = ticket.key

    def reset(self, name: str) -> None:
        """Forget the slot's keys and orphan whatever is still in flight."""
        slot = self.slot(name)
        if slot.task is not None and slot.task is not current_task() and not slot.task.done():
            slot.task.cancel()
        slot.generation += 1
        slot.inflight_key = None
        slot.last_completed_key = None
        slot.task = None


__all__ = ["GuardSlot", "RequestGuard", "Ticket", "current_task", "request_key"]
