from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from ...schemas import ListPage, RoomDetail, RoomListing, RoomSearchParams, RoomSeekingPost
from ..result import ApiResult, ApiSuccess
from .base import EndpointGroup, QueryParams


class ListingsApi(EndpointGroup):
    """Public room listings and room-seeking posts; no login required."""

    async def search_rooms(
        self, params: Union[RoomSearchParams, Mapping[str, Any], None] = None
    ) -> ApiResult[ListPage[RoomListing]]:
        if not isinstance(params, RoomSearchParams):
            params = RoomSearchParams.model_validate(dict(params or {}))
        return await self._page(
            "/api/listings/rooms",
            RoomListing,
            params,
            fallback="Failed to load room listings",
            default_limit=params.limit,
        )

    async def featured_rooms(self, limit: int = 4) -> ApiResult[List[RoomListing]]:
        result = await self.search_rooms(RoomSearchParams(sort_by="createdAt", sort_order="desc", page=1))
        if not result.success:
            return result
        return ApiSuccess(data=result.data.data[:limit])

    async def room_by_slug(self, slug: str) -> ApiResult[RoomDetail]:
        return await self._entity(
            f"/api/rooms/public/{slug}",
            RoomDetail,
            fallback="Failed to load room details",
            status_messages={404: "Room not found"},
        )

    async def public_room_seeking_posts(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[RoomSeekingPost]]:
        return await self._page(
            "/api/listings/room-seeking-posts",
            RoomSeekingPost,
            params,
            fallback="Failed to load room-seeking posts",
            default_limit=default_limit or 20,
        )


__all__ = ["ListingsApi"]
