from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ...schemas import (
    BookingRequest,
    CancelBookingRequestRequest,
    ConfirmBookingRequestRequest,
    CreateBookingRequestRequest,
    ListPage,
    UpdateBookingRequestRequest,
)
from ..client import precondition_failure
from ..result import ApiResult
from .base import EndpointGroup, QueryParams

logger = logging.getLogger(__name__)

BASE_PATH = "/api/booking-requests"


def _owner_id(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    room = payload.get("data") if isinstance(payload.get("data"), Mapping) else payload
    owner = room.get("owner")
    if isinstance(owner, Mapping) and owner.get("id"):
        return str(owner["id"])
    return None


def _user_id(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    user = payload.get("data") if isinstance(payload.get("data"), Mapping) else payload
    return str(user["id"]) if user.get("id") else None


class BookingRequestsApi(EndpointGroup):
    async def _is_own_room(self, room_id: str) -> bool:
        room = await self.client.request(f"/api/rooms/{room_id}", fallback="Room lookup failed")
        me = await self.client.request("/api/auth/me", fallback="User lookup failed")
        if not room.success or not me.success:
            # Ownership cannot be verified; the backend still validates the booking.
            logger.info("Could not verify ownership of room %s", room_id)
            return False
        owner_id = _owner_id(room.data)
        return owner_id is not None and owner_id == _user_id(me.data)

    async def create(
        self, data: CreateBookingRequestRequest, *, check_ownership: bool = True
    ) -> ApiResult[BookingRequest]:
        room_id = data.room_id or (data.model_extra or {}).get("roomInstanceId")
        if not room_id:
            return precondition_failure("Invalid room id")
        if check_ownership and await self._is_own_room(room_id):
            return precondition_failure("You cannot request to rent your own room")
        payload = data.model_copy(update={"room_id": room_id})
        body = payload.to_wire()
        body.pop("roomInstanceId", None)
        return await self._entity(
            BASE_PATH,
            BookingRequest,
            method="POST",
            json=body,
            fallback="Failed to create booking request",
        )

    async def received(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[BookingRequest]]:
        return await self._page(
            f"{BASE_PATH}/received",
            BookingRequest,
            params,
            fallback="Failed to load received booking requests",
            default_limit=default_limit or 20,
        )

    async def mine(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[BookingRequest]]:
        return await self._page(
            f"{BASE_PATH}/my-requests",
            BookingRequest,
            params,
            fallback="Failed to load your booking requests",
            default_limit=default_limit or 20,
        )

    async def get(self, request_id: str) -> ApiResult[BookingRequest]:
        return await self._entity(
            f"{BASE_PATH}/{request_id}",
            BookingRequest,
            fallback="Failed to load booking request",
        )

    async def owner_update(self, request_id: str, data: UpdateBookingRequestRequest) -> ApiResult[Any]:
        return await self._command(
            f"{BASE_PATH}/{request_id}",
            method="PATCH",
            json=data,
            fallback="Failed to update booking request",
        )

    async def confirm(
        self, request_id: str, data: Optional[ConfirmBookingRequestRequest] = None
    ) -> ApiResult[Any]:
        return await self._command(
            f"{BASE_PATH}/{request_id}/confirm",
            method="POST",
            json=data or ConfirmBookingRequestRequest(),
            fallback="Failed to confirm booking request",
        )

    async def cancel(
        self, request_id: str, data: Optional[CancelBookingRequestRequest] = None
    ) -> ApiResult[Any]:
        return await self._command(
            f"{BASE_PATH}/{request_id}/cancel",
            method="PATCH",
            json=data or CancelBookingRequestRequest(),
            fallback="Failed to cancel booking request",
        )


__all__ = ["BookingRequestsApi"]
