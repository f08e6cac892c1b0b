from __future__ import annotations

from typing import Optional

from ...schemas import CreateRentalRequest, ListPage, Rental, TerminateRentalRequest, UpdateRentalRequest
from ..result import ApiResult
from .base import EndpointGroup, QueryParams

BASE_PATH = "/api/rentals"


class RentalsApi(EndpointGroup):
    async def create(self, data: CreateRentalRequest) -> ApiResult[Rental]:
        return await self._entity(
            BASE_PATH,
            Rental,
            method="POST",
            json=data,
            fallback="Failed to create rental",
        )

    async def list(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[Rental]]:
        return await self._page(
            BASE_PATH,
            Rental,
            params,
            fallback="Failed to load rentals",
            default_limit=default_limit or 20,
        )

    async def get(self, rental_id: str) -> ApiResult[Rental]:
        return await self._entity(f"{BASE_PATH}/{rental_id}", Rental, fallback="Failed to load rental")

    async def update(self, rental_id: str, data: UpdateRentalRequest) -> ApiResult[Rental]:
        return await self._entity(
            f"{BASE_PATH}/{rental_id}",
            Rental,
            method="PATCH",
            json=data,
            fallback="Failed to update rental",
        )

    async def terminate(self, rental_id: str, data: TerminateRentalRequest) -> ApiResult[Rental]:
        return await self._entity(
            f"{BASE_PATH}/{rental_id}/terminate",
            Rental,
            method="PATCH",
            json=data,
            fallback="Failed to terminate rental",
        )


__all__ = ["RentalsApi"]
