from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field

from .common import Entity, WireModel


class RoomSearchParams(WireModel):
    search: Optional[str] = None
    province_id: Optional[int] = None
    district_id: Optional[int] = None
    ward_id: Optional[int] = None
    room_type: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_area: Optional[Decimal] = None
    max_area: Optional[Decimal] = None
    amenities: Optional[str] = None
    max_occupancy: Optional[int] = None
    is_verified: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: int = 1
    limit: int = 20

    def to_query(self) -> dict[str, Any]:
        query = self.to_wire()
        # The listings endpoint requires a search term; "." matches everything.
        query["search"] = self.search or "."
        return query


class RoomPricing(WireModel):
    base_price_monthly: Optional[Decimal] = None
    deposit_amount: Optional[Decimal] = None
    utility_included: Optional[bool] = None


class RoomLocation(WireModel):
    province_id: Optional[int] = None
    province_name: Optional[str] = None
    district_id: Optional[int] = None
    district_name: Optional[str] = None
    ward_id: Optional[int] = None
    ward_name: Optional[str] = None


class RoomListing(Entity):
    slug: Optional[str] = None
    name: Optional[str] = None
    room_type: Optional[str] = None
    area_sqm: Optional[Decimal] = None
    max_occupancy: Optional[int] = None
    is_verified: bool = False
    building_name: Optional[str] = None
    address: Optional[str] = None
    location: Optional[RoomLocation] = None
    pricing: Optional[RoomPricing] = None
    images: List[dict[str, Any]] = Field(default_factory=list)


class RoomDetail(RoomListing):
    description: Optional[str] = None
    floor_number: Optional[int] = None
    is_active: bool = True
    building_description: Optional[str] = None
    owner: Optional[dict[str, Any]] = None
    amenities: List[dict[str, Any]] = Field(default_factory=list)
    costs: List[dict[str, Any]] = Field(default_factory=list)
    rules: List[dict[str, Any]] = Field(default_factory=list)


__all__ = ["RoomSearchParams", "RoomPricing", "RoomLocation", "RoomListing", "RoomDetail"]
