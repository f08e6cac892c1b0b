from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import Field

from .common import Entity, WireModel
from .pagination import ListPage


class RatingTargetType(str, enum.Enum):
    TENANT = "tenant"
    LANDLORD = "landlord"
    ROOM = "room"


class Rating(Entity):
    target_type: Optional[RatingTargetType] = None
    target_id: Optional[str] = None
    reviewer_id: Optional[str] = None
    rental_id: Optional[str] = None
    rating: int = 0
    content: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    is_current_user: bool = False
    reviewer: Optional[dict[str, Any]] = None


class RatingStatistics(WireModel):
    total_ratings: int = 0
    average_rating: float = 0.0
    distribution: dict[str, int] = Field(default_factory=dict)


class CreateRatingRequest(WireModel):
    target_type: RatingTargetType
    target_id: str
    rental_id: Optional[str] = None
    rating: int
    content: Optional[str] = None
    images: Optional[List[str]] = None


class UpdateRatingRequest(WireModel):
    rating: Optional[int] = None
    content: Optional[str] = None
    images: Optional[List[str]] = None


@dataclass
class RatingPage(ListPage[Rating]):
    """A page of ratings plus the target's aggregate statistics, when sent."""

    stats: Optional[RatingStatistics] = None


__all__ = [
    "RatingTargetType",
    "Rating",
    "RatingStatistics",
    "CreateRatingRequest",
    "UpdateRatingRequest",
    "RatingPage",
]
