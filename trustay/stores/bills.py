from __future__ import annotations

from typing import Any, Mapping, Optional

from ..api.endpoints import BillsApi
from ..schemas import Bill, CreateBillRequest, UpdateBillRequest
from ..store import EntityStore, StatePersistence


class BillStore(EntityStore):
    name = "bills"

    def __init__(
        self,
        bills: BillsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._bills = bills
        self.page_size = page_size
        self.bills = self._list("bills", Bill, self._fetch, fallback="Failed to load bills")
        self.current = self._detail("current", Bill, fallback="Failed to load bill")

    async def _fetch(self, params: Mapping[str, Any]):
        return await self._bills.list(params, default_limit=self.page_size)

    async def load_bills(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return await self.bills.search(query, append=append, force=force)

    async def load_by_id(self, bill_id: str) -> bool:
        return await self.current.load(bill_id, lambda: self._bills.get(bill_id))

    def _replace(self, bill: Bill) -> None:
        self.bills.replace_by_id(bill.id, bill)
        if self.current.matches(bill.id):
            self.current.set(bill)

    async def create(self, data: CreateBillRequest) -> Optional[Bill]:
        result = await self._mutate(
            "create",
            lambda: self._bills.create_for_room(data),
            apply=self.bills.prepend,
            fallback="Failed to create bill",
        )
        return result.data if result.success else None

    async def update(self, bill_id: str, data: UpdateBillRequest) -> bool:
        result = await self._mutate(
            "update",
            lambda: self._bills.update(bill_id, data),
            apply=self._replace,
            fallback="Failed to update bill",
        )
        return result.success

    async def remove(self, bill_id: str) -> bool:
        def apply(_: Any) -> None:
            self.bills.remove_by_id(bill_id)
            if self.current.matches(bill_id):
                self.current.set(None)

        result = await self._mutate(
            "remove",
            lambda: self._bills.delete(bill_id),
            apply=apply,
            fallback="Failed to delete bill",
        )
        return result.success

    async def mark_paid(self, bill_id: str) -> bool:
        result = await self._mutate(
            "mark_paid",
            lambda: self._bills.mark_paid(bill_id),
            apply=self._replace,
            fallback="Failed to mark bill as paid",
        )
        return result.success

    def clear_current(self) -> None:
        self.current.clear()


__all__ = ["BillStore"]
