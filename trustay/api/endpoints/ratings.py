from __future__ import annotations

from typing import Any, Mapping, Optional

from ...schemas import (
    CreateRatingRequest,
    Rating,
    RatingPage,
    RatingStatistics,
    RatingTargetType,
    UpdateRatingRequest,
)
from ..client import precondition_failure
from ..normalize import normalize_list, parse_decimal_fields
from ..result import ApiFailure, ApiResult, ApiSuccess
from .base import EndpointGroup, QueryParams, to_query

BASE_PATH = "/api/ratings"


def _rating_page(raw: Any, *, page: int, limit: int) -> RatingPage:
    listed = normalize_list(raw, Rating, page=page, limit=limit)
    stats = raw.get("stats") if isinstance(raw, Mapping) else None
    return RatingPage(
        data=listed.data,
        meta=listed.meta,
        stats=RatingStatistics.model_validate(parse_decimal_fields(stats)) if isinstance(stats, Mapping) else None,
    )


def _target_query(target_type: RatingTargetType, target_id: str) -> dict[str, Any]:
    return {"targetType": RatingTargetType(target_type).value, "targetId": target_id, "limit": 1}


class RatingsApi(EndpointGroup):
    """Reviews of tenants, landlords and rooms."""

    async def _ratings(self, path: str, params: QueryParams, fallback: str, default_limit: int) -> ApiResult[RatingPage]:
        query = to_query(params)
        page = int(query.get("page") or 1)
        limit = int(query.get("limit") or default_limit)
        return await self.client.request(
            path,
            "GET",
            params=query,
            fallback=fallback,
            decode=lambda raw: _rating_page(raw, page=page, limit=limit),
        )

    async def list(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[RatingPage]:
        return await self._ratings(BASE_PATH, params, "Failed to get ratings", default_limit or 20)

    async def by_user(
        self, user_id: str, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[RatingPage]:
        return await self._ratings(
            f"{BASE_PATH}/user/{user_id}", params, "Failed to get user created ratings", default_limit or 20
        )

    async def get(self, rating_id: str) -> ApiResult[Rating]:
        return await self._entity(f"{BASE_PATH}/{rating_id}", Rating, fallback="Failed to get rating")

    async def create(self, data: CreateRatingRequest) -> ApiResult[Rating]:
        if not 1 <= data.rating <= 5:
            return precondition_failure("Rating must be between 1 and 5")
        return await self._entity(BASE_PATH, Rating, method="POST", json=data, fallback="Failed to create rating")

    async def update(self, rating_id: str, data: UpdateRatingRequest) -> ApiResult[Rating]:
        if data.rating is not None and not 1 <= data.rating <= 5:
            return precondition_failure("Rating must be between 1 and 5")
        return await self._entity(
            f"{BASE_PATH}/{rating_id}",
            Rating,
            method="PATCH",
            json=data,
            fallback="Failed to update rating",
        )

    async def delete(self, rating_id: str) -> ApiResult[Any]:
        return await self._command(f"{BASE_PATH}/{rating_id}", method="DELETE", fallback="Failed to delete rating")

    async def own_rating(self, target_type: RatingTargetType, target_id: str) -> ApiResult[Optional[Rating]]:
        """The current user's rating of a target, or ``None`` when they have not rated it.

        The backend lists the caller's own rating first, so one item is enough.
        """
        result = await self.list(_target_query(target_type, target_id))
        if not result.success:
            return result
        mine = next((rating for rating in result.data.data if rating.is_current_user), None)
        return ApiSuccess(data=mine)

    async def stats(self, target_type: RatingTargetType, target_id: str) -> ApiResult[RatingStatistics]:
        result = await self.list(_target_query(target_type, target_id))
        if not result.success:
            return result
        if result.data.stats is None:
            return ApiFailure(error="Failed to get rating statistics")
        return ApiSuccess(data=result.data.stats)


__all__ = ["RatingsApi"]
