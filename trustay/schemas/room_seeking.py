from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field

from .common import Entity, WireModel


class RoomSeekingStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    EXPIRED = "expired"


class RoomSeekingPost(Entity):
    title: str = ""
    description: str = ""
    slug: Optional[str] = None
    status: RoomSeekingStatus = RoomSeekingStatus.ACTIVE
    requester_id: Optional[str] = None
    preferred_province_id: Optional[int] = None
    preferred_district_id: Optional[int] = None
    preferred_ward_id: Optional[int] = None
    min_budget: Optional[Decimal] = None
    max_budget: Optional[Decimal] = None
    currency: Optional[str] = None
    preferred_room_type: Optional[str] = None
    occupancy: Optional[int] = None
    move_in_date: Optional[str] = None
    is_public: bool = True
    contact_count: int = 0
    view_count: int = 0
    amenities: List[dict[str, Any]] = Field(default_factory=list)


class CreateRoomSeekingPostRequest(WireModel):
    title: str
    description: str
    preferred_province_id: int
    preferred_district_id: int
    preferred_ward_id: int
    min_budget: Decimal
    max_budget: Decimal
    occupancy: int
    currency: str = "VND"
    preferred_room_type: Optional[str] = None
    move_in_date: Optional[str] = None
    amenity_ids: List[str] = Field(default_factory=list)
    is_public: bool = True


class UpdateRoomSeekingPostRequest(WireModel):
    title: Optional[str] = None
    description: Optional[str] = None
    preferred_province_id: Optional[int] = None
    preferred_district_id: Optional[int] = None
    preferred_ward_id: Optional[int] = None
    min_budget: Optional[Decimal] = None
    max_budget: Optional[Decimal] = None
    occupancy: Optional[int] = None
    preferred_room_type: Optional[str] = None
    move_in_date: Optional[str] = None
    amenity_ids: Optional[List[str]] = None
    is_public: Optional[bool] = None


__all__ = [
    "RoomSeekingStatus",
    "RoomSeekingPost",
    "CreateRoomSeekingPostRequest",
    "UpdateRoomSeekingPostRequest",
]
