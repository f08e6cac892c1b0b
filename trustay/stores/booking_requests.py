from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from ..api.endpoints import BookingRequestsApi, ContractsApi, RentalsApi
from ..api.result import ApiFailure
from ..log import log_store_action
from ..schemas import (
    BookingRequest,
    BookingStatus,
    CancelBookingRequestRequest,
    ConfirmBookingRequestRequest,
    CreateBookingRequestRequest,
    CreateRentalRequest,
    UpdateBookingRequestRequest,
)
from ..store import EntityStore, StatePersistence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalOutcome:
    rental_id: str
    contract_id: Optional[str]


class BookingRequestStore(EntityStore):
    """Booking requests received as a landlord and sent as a tenant."""

    name = "booking-requests"

    def __init__(
        self,
        bookings: BookingRequestsApi,
        rentals: RentalsApi,
        contracts: ContractsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._bookings = bookings
        self._rentals = rentals
        self._contracts = contracts
        self.page_size = page_size
        self.received = self._list(
            "received", BookingRequest, self._fetch_received, fallback="Failed to load received booking requests"
        )
        self.mine = self._list("mine", BookingRequest, self._fetch_mine, fallback="Failed to load your booking requests")
        self.current = self._detail("current", BookingRequest, fallback="Failed to load booking request")

    async def _fetch_received(self, params: Mapping[str, Any]):
        return await self._bookings.received(params, default_limit=self.page_size)

    async def _fetch_mine(self, params: Mapping[str, Any]):
        return await self._bookings.mine(params, default_limit=self.page_size)

    def _query(self, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return query

    async def load_received(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        return await self.received.search(self._query(params), append=append, force=force)

    async def load_mine(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        return await self.mine.search(self._query(params), append=append, force=force)

    async def load_by_id(self, request_id: str) -> bool:
        return await self.current.load(request_id, lambda: self._bookings.get(request_id))

    async def create(self, data: CreateBookingRequestRequest) -> bool:
        result = await self._mutate(
            "create",
            lambda: self._bookings.create(data),
            apply=self.mine.prepend,
            fallback="Failed to create booking request",
        )
        return result.success

    def _patch(self, request_id: str, **fields: Any) -> None:
        self.received.patch_by_id(request_id, **fields)
        self.mine.patch_by_id(request_id, **fields)
        if self.current.matches(request_id):
            self.current.patch(**fields)

    async def owner_update(self, request_id: str, data: UpdateBookingRequestRequest) -> bool:
        fields: dict[str, Any] = {}
        if data.status is not None:
            fields["status"] = data.status
        if data.owner_notes is not None:
            fields["owner_notes"] = data.owner_notes
        result = await self._mutate(
            "owner_update",
            lambda: self._bookings.owner_update(request_id, data),
            apply=lambda _: self._patch(request_id, **fields),
            fallback="Failed to update booking request",
        )
        return result.success

    async def confirm(self, request_id: str, data: Optional[ConfirmBookingRequestRequest] = None) -> bool:
        def apply(_: Any) -> None:
            self._patch(request_id, is_confirmed_by_tenant=True, confirmed_at=datetime.now(timezone.utc))

        result = await self._mutate(
            "confirm",
            lambda: self._bookings.confirm(request_id, data),
            apply=apply,
            fallback="Failed to confirm booking request",
        )
        return result.success

    async def cancel_mine(self, request_id: str, data: Optional[CancelBookingRequestRequest] = None) -> bool:
        reason = data.cancellation_reason if data is not None else None
        fields: dict[str, Any] = {"status": BookingStatus.CANCELLED}
        if reason:
            fields["cancellation_reason"] = reason
        result = await self._mutate(
            "cancel_mine",
            lambda: self._bookings.cancel(request_id, data),
            apply=lambda _: self._patch(request_id, **fields),
            fallback="Failed to cancel booking request",
        )
        return result.success

    async def _rental_request(self, request_id: str, owner_notes: Optional[str]):
        booking = self.received.find(request_id)
        if booking is None and self.current.matches(request_id):
            booking = self.current.record
        if booking is None:
            loaded = await self._bookings.get(request_id)
            if not loaded.success:
                return loaded
            booking = loaded.data
        if not booking.room_id or not booking.tenant_id:
            return ApiFailure(error="Booking request is missing room or tenant information")
        return CreateRentalRequest(
            booking_request_id=request_id,
            room_instance_id=booking.room_id,
            tenant_id=booking.tenant_id,
            contract_start_date=booking.move_in_date or date.today().isoformat(),
            contract_end_date=booking.move_out_date,
            owner_notes=owner_notes,
        )

    async def approve_and_create_rental(
        self, request_id: str, owner_notes: Optional[str] = None
    ) -> Optional[ApprovalOutcome]:
        """Approve a request, open a rental for it and generate its contract.

        Steps run in order and the first failure stops the flow with that
        step's message in ``submit_error``. Steps that already succeeded on
        the backend are kept as they are.
        """
        self.submitting = True
        self.submit_error = None
        self._notify()
        try:
            return await self._approve(request_id, owner_notes)
        finally:
            self.submitting = False
            self._notify()

    async def _approve(self, request_id: str, owner_notes: Optional[str]) -> Optional[ApprovalOutcome]:
        update = UpdateBookingRequestRequest(status=BookingStatus.APPROVED, owner_notes=owner_notes)
        approved = await self._bookings.owner_update(request_id, update)
        if not approved.success:
            return self._abort("approve", approved.error)
        fields: dict[str, Any] = {"status": BookingStatus.APPROVED}
        if owner_notes:
            fields["owner_notes"] = owner_notes
        self._patch(request_id, **fields)

        rental_request = await self._rental_request(request_id, owner_notes)
        if isinstance(rental_request, ApiFailure):
            return self._abort("create_rental", rental_request.error)
        rental = await self._rentals.create(rental_request)
        if not rental.success:
            return self._abort("create_rental", rental.error)

        contract = await self._contracts.auto_generate(rental.data.id)
        if not contract.success:
            return self._abort("generate_contract", contract.error)

        log_store_action(self.name, "approve_and_create_rental", "applied", rental_id=rental.data.id)
        return ApprovalOutcome(rental_id=rental.data.id, contract_id=contract.data.id)

    def _abort(self, step: str, message: str) -> None:
        self.submit_error = message
        log_store_action(self.name, "approve_and_create_rental", "failed", step=step, error=message)
        return None

    def clear_current(self) -> None:
        self.current.clear()


__all__ = ["ApprovalOutcome", "BookingRequestStore"]
