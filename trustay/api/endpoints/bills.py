from __future__ import annotations

from typing import Any, Optional

from ...schemas import Bill, CreateBillRequest, ListPage, UpdateBillRequest
from ..result import ApiResult
from .base import EndpointGroup, QueryParams

BASE_PATH = "/api/bills"


class BillsApi(EndpointGroup):
    """Bill amounts arrive as decimal objects; the normalizer flattens them."""

    async def list(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[Bill]]:
        return await self._page(
            BASE_PATH,
            Bill,
            params,
            fallback="Failed to load bills",
            default_limit=default_limit or 20,
        )

    async def get(self, bill_id: str) -> ApiResult[Bill]:
        return await self._entity(f"{BASE_PATH}/{bill_id}", Bill, fallback="Failed to load bill")

    async def create_for_room(self, data: CreateBillRequest) -> ApiResult[Bill]:
        return await self._entity(
            f"{BASE_PATH}/create-for-room",
            Bill,
            method="POST",
            json=data,
            fallback="Failed to create bill",
        )

    async def update(self, bill_id: str, data: UpdateBillRequest) -> ApiResult[Bill]:
        return await self._entity(
            f"{BASE_PATH}/{bill_id}",
            Bill,
            method="PATCH",
            json=data,
            fallback="Failed to update bill",
        )

    async def delete(self, bill_id: str) -> ApiResult[Any]:
        return await self._command(f"{BASE_PATH}/{bill_id}", method="DELETE", fallback="Failed to delete bill")

    async def mark_paid(self, bill_id: str) -> ApiResult[Bill]:
        return await self._entity(
            f"{BASE_PATH}/{bill_id}/mark-paid",
            Bill,
            method="POST",
            fallback="Failed to mark bill as paid",
        )


__all__ = ["BillsApi"]
