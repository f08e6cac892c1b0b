from __future__ import annotations

from typing import Any, Mapping, Optional

from ..api.endpoints import RentalsApi
from ..schemas import CreateRentalRequest, Rental, TerminateRentalRequest, UpdateRentalRequest
from ..store import EntityStore, StatePersistence


class RentalStore(EntityStore):
    name = "rentals"

    def __init__(
        self,
        rentals: RentalsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._rentals = rentals
        self.page_size = page_size
        self.rentals = self._list("rentals", Rental, self._fetch, fallback="Failed to load rentals")
        self.current = self._detail("current", Rental, fallback="Failed to load rental")

    async def _fetch(self, params: Mapping[str, Any]):
        return await self._rentals.list(params, default_limit=self.page_size)

    async def load_rentals(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return await self.rentals.search(query, append=append, force=force)

    async def load_by_id(self, rental_id: str) -> bool:
        return await self.current.load(rental_id, lambda: self._rentals.get(rental_id))

    def _replace(self, rental: Rental) -> None:
        self.rentals.replace_by_id(rental.id, rental)
        if self.current.matches(rental.id):
            self.current.set(rental)

    async def create(self, data: CreateRentalRequest) -> Optional[Rental]:
        result = await self._mutate(
            "create",
            lambda: self._rentals.create(data),
            apply=self.rentals.prepend,
            fallback="Failed to create rental",
        )
        return result.data if result.success else None

    async def update(self, rental_id: str, data: UpdateRentalRequest) -> bool:
        result = await self._mutate(
            "update",
            lambda: self._rentals.update(rental_id, data),
            apply=self._replace,
            fallback="Failed to update rental",
        )
        return result.success

    async def terminate(self, rental_id: str, data: TerminateRentalRequest) -> bool:
        result = await self._mutate(
            "terminate",
            lambda: self._rentals.terminate(rental_id, data),
            apply=self._replace,
            fallback="Failed to terminate rental",
        )
        return result.success

    def clear_current(self) -> None:
        self.current.clear()


__all__ = ["RentalStore"]
