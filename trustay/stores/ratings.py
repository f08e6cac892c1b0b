from __future__ import annotations

from typing import Any, Mapping, Optional

from ..api.endpoints import RatingsApi
from ..schemas import (
    CreateRatingRequest,
    Rating,
    RatingPage,
    RatingStatistics,
    RatingTargetType,
    UpdateRatingRequest,
)
from ..store import EntityStore, StatePersistence

USER_KEY = "userId"


class RatingStore(EntityStore):
    """Reviews of a target, reviews written by a user and the target's statistics."""

    name = "ratings"

    def __init__(
        self,
        ratings: RatingsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._ratings = ratings
        self.page_size = page_size
        self.ratings = self._list(
            "ratings", Rating, self._fetch, fallback="Failed to get ratings", on_page=self._apply_stats
        )
        self.user_ratings = self._list(
            "user-ratings", Rating, self._fetch_by_user, fallback="Failed to get user created ratings"
        )
        self.current = self._detail("current", Rating, fallback="Failed to get rating")
        self.statistics = self._detail("statistics", RatingStatistics, fallback="Failed to get rating stats")
        self.own_rating = self._detail("own-rating", Rating, fallback="Failed to check rating")

    async def _fetch(self, params: Mapping[str, Any]):
        return await self._ratings.list(params, default_limit=self.page_size)

    async def _fetch_by_user(self, params: Mapping[str, Any]):
        query = {key: value for key, value in params.items() if key != USER_KEY}
        return await self._ratings.by_user(params[USER_KEY], query, default_limit=self.page_size)

    def _apply_stats(self, page: RatingPage) -> None:
        if page.stats is not None:
            self.statistics.set(page.stats)

    def _query(self, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return query

    async def load_ratings(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        return await self.ratings.search(self._query(params), append=append, force=force)

    async def load_user_ratings(
        self,
        user_id: str,
        params: Optional[Mapping[str, Any]] = None,
        append: bool = False,
        *,
        force: bool = False,
    ) -> bool:
        query = self._query(params)
        query.pop("reviewerId", None)
        query[USER_KEY] = user_id
        return await self.user_ratings.search(query, append=append, force=force)

    async def load_by_id(self, rating_id: str) -> bool:
        return await self.current.load(rating_id, lambda: self._ratings.get(rating_id))

    async def check_rated(self, target_type: RatingTargetType, target_id: str) -> bool:
        """Load the current user's own rating of a target into ``own_rating``."""
        key = f"{RatingTargetType(target_type).value}:{target_id}"
        return await self.own_rating.load(key, lambda: self._ratings.own_rating(target_type, target_id))

    @property
    def has_rated(self) -> bool:
        return self.own_rating.record is not None

    async def load_stats(self, target_type: RatingTargetType, target_id: str) -> bool:
        key = f"{RatingTargetType(target_type).value}:{target_id}"
        return await self.statistics.load(key, lambda: self._ratings.stats(target_type, target_id))

    def _replace(self, rating: Rating) -> None:
        self.ratings.replace_by_id(rating.id, rating)
        self.user_ratings.replace_by_id(rating.id, rating)
        if self.current.matches(rating.id):
            self.current.set(rating)
        if self.own_rating.matches(rating.id):
            self.own_rating.set(rating)

    async def create(self, data: CreateRatingRequest) -> Optional[Rating]:
        def apply(rating: Rating) -> None:
            self.ratings.prepend(rating)
            self.own_rating.set(rating)

        result = await self._mutate(
            "create",
            lambda: self._ratings.create(data),
            apply=apply,
            fallback="Failed to create rating",
        )
        return result.data if result.success else None

    async def update(self, rating_id: str, data: UpdateRatingRequest) -> Optional[Rating]:
        result = await self._mutate(
            "update",
            lambda: self._ratings.update(rating_id, data),
            apply=self._replace,
            fallback="Failed to update rating",
        )
        return result.data if result.success else None

    async def delete(self, rating_id: str) -> bool:
        def apply(_: Any) -> None:
            self.ratings.remove_by_id(rating_id)
            self.user_ratings.remove_by_id(rating_id)
            for slot in (self.current, self.own_rating):
                if slot.matches(rating_id):
                    slot.set(None)

        result = await self._mutate(
            "delete",
            lambda: self._ratings.delete(rating_id),
            apply=apply,
            fallback="Failed to delete rating",
        )
        return result.success

    def clear_current(self) -> None:
        self.current.clear()

    def clear_ratings(self) -> None:
        self.ratings.clear()
        self.statistics.clear()


__all__ = ["RatingStore"]
