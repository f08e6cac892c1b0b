from __future__ import annotations

import enum
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .common import Entity, WireModel


class BillStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class BillItem(WireModel):
    item_type: Optional[str] = None
    item_name: str = ""
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    amount: Decimal = Decimal("0")
    currency: Optional[str] = None


class Bill(Entity):
    rental_id: Optional[str] = None
    room_instance_id: Optional[str] = None
    billing_period: Optional[str] = None
    billing_month: Optional[int] = None
    billing_year: Optional[int] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    subtotal: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    status: BillStatus = BillStatus.DRAFT
    due_date: Optional[str] = None
    paid_date: Optional[str] = None
    notes: Optional[str] = None
    bill_items: List[BillItem] = Field(default_factory=list)


class CreateBillRequest(WireModel):
    room_instance_id: str
    billing_period: str
    billing_month: int
    billing_year: int
    period_start: str
    period_end: str
    occupancy_count: Optional[int] = None
    notes: Optional[str] = None


class UpdateBillRequest(WireModel):
    notes: Optional[str] = None
    due_date: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    status: Optional[BillStatus] = None


__all__ = [
    "BillStatus",
    "BillItem",
    "Bill",
    "CreateBillRequest",
    "UpdateBillRequest",
]
