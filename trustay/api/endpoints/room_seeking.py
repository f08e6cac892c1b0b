from __future__ import annotations

import math
from typing import Any, Optional

from ...schemas import (
    CreateRoomSeekingPostRequest,
    ListPage,
    RoomSeekingPost,
    RoomSeekingStatus,
    UpdateRoomSeekingPostRequest,
)
from ..client import precondition_failure
from ..result import ApiResult
from .base import EndpointGroup, QueryParams

BASE_PATH = "/api/room-seeking-posts"


def _is_number(value: Any) -> bool:
    try:
        return not math.isnan(float(value))
    except (TypeError, ValueError):
        return False


class RoomSeekingApi(EndpointGroup):
    async def create(self, data: CreateRoomSeekingPostRequest) -> ApiResult[RoomSeekingPost]:
        if not data.title or not data.description:
            return precondition_failure("Title and description are required")
        location = (data.preferred_province_id, data.preferred_district_id, data.preferred_ward_id)
        if not all(_is_number(value) for value in location):
            return precondition_failure("Invalid address data")
        if not all(_is_number(value) for value in (data.min_budget, data.max_budget, data.occupancy)):
            return precondition_failure("Invalid numeric data")
        return await self._entity(
            BASE_PATH,
            RoomSeekingPost,
            method="POST",
            json=data,
            fallback="Failed to create room-seeking post",
        )

    async def get(self, post_id: str) -> ApiResult[RoomSeekingPost]:
        return await self._entity(
            f"{BASE_PATH}/{post_id}",
            RoomSeekingPost,
            fallback="Failed to load room-seeking post",
        )

    async def update(self, post_id: str, data: UpdateRoomSeekingPostRequest) -> ApiResult[RoomSeekingPost]:
        return await self._entity(
            f"{BASE_PATH}/{post_id}",
            RoomSeekingPost,
            method="PATCH",
            json=data,
            fallback="Failed to update room-seeking post",
        )

    async def update_status(self, post_id: str, status: RoomSeekingStatus) -> ApiResult[RoomSeekingPost]:
        return await self._entity(
            f"{BASE_PATH}/{post_id}/status",
            RoomSeekingPost,
            method="PATCH",
            json={"status": RoomSeekingStatus(status).value},
            fallback="Failed to update room-seeking post status",
        )

    async def delete(self, post_id: str) -> ApiResult[Any]:
        return await self._command(
            f"{BASE_PATH}/{post_id}",
            method="DELETE",
            fallback="Failed to delete room-seeking post",
        )

    async def increment_contact(self, post_id: str) -> ApiResult[Any]:
        return await self._command(
            f"{BASE_PATH}/{post_id}/contact",
            method="POST",
            fallback="Failed to record contact",
        )

    async def mine(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[RoomSeekingPost]]:
        return await self._page(
            f"{BASE_PATH}/me",
            RoomSeekingPost,
            params,
            fallback="Failed to load your room-seeking posts",
            default_limit=default_limit or 20,
        )


__all__ = ["RoomSeekingApi"]
