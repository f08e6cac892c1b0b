from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Optional

from .common import Entity, WireModel


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class BookingRequest(Entity):
    room_id: Optional[str] = None
    tenant_id: Optional[str] = None
    owner_id: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    move_in_date: Optional[str] = None
    move_out_date: Optional[str] = None
    message_to_owner: Optional[str] = None
    owner_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    is_confirmed_by_tenant: bool = False
    confirmed_at: Optional[datetime] = None
    room: Optional[dict[str, Any]] = None
    tenant: Optional[dict[str, Any]] = None


class CreateBookingRequestRequest(WireModel):
    room_id: Optional[str] = None
    move_in_date: str
    move_out_date: Optional[str] = None
    message_to_owner: Optional[str] = None


class UpdateBookingRequestRequest(WireModel):
    status: Optional[BookingStatus] = None
    owner_notes: Optional[str] = None


class ConfirmBookingRequestRequest(WireModel):
    tenant_notes: Optional[str] = None


class CancelBookingRequestRequest(WireModel):
    cancellation_reason: Optional[str] = None


__all__ = [
    "BookingStatus",
    "BookingRequest",
    "CreateBookingRequestRequest",
    "UpdateBookingRequestRequest",
    "ConfirmBookingRequestRequest",
    "CancelBookingRequestRequest",
]
