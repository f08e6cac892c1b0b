from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any, Optional

from .common import Entity, WireModel


class RentalStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING_RENEWAL = "pending_renewal"
    TERMINATED = "terminated"
    EXPIRED = "expired"


class Rental(Entity):
    booking_request_id: Optional[str] = None
    room_instance_id: Optional[str] = None
    tenant_id: Optional[str] = None
    owner_id: Optional[str] = None
    contract_start_date: Optional[str] = None
    contract_end_date: Optional[str] = None
    monthly_rent: Optional[Decimal] = None
    deposit_paid: Optional[Decimal] = None
    status: RentalStatus = RentalStatus.ACTIVE
    termination_reason: Optional[str] = None
    room_instance: Optional[dict[str, Any]] = None


class CreateRentalRequest(WireModel):
    booking_request_id: Optional[str] = None
    room_instance_id: Optional[str] = None
    tenant_id: Optional[str] = None
    contract_start_date: str
    contract_end_date: Optional[str] = None
    monthly_rent: Optional[Decimal] = None
    deposit_paid: Optional[Decimal] = None
    owner_notes: Optional[str] = None


class UpdateRentalRequest(WireModel):
    contract_end_date: Optional[str] = None
    monthly_rent: Optional[Decimal] = None
    deposit_paid: Optional[Decimal] = None
    status: Optional[RentalStatus] = None


class TerminateRentalRequest(WireModel):
    termination_notice_date: str
    termination_reason: Optional[str] = None


__all__ = [
    "RentalStatus",
    "Rental",
    "CreateRentalRequest",
    "UpdateRentalRequest",
    "TerminateRentalRequest",
]
