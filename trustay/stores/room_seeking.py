from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..api.endpoints import ListingsApi, RoomSeekingApi
from ..schemas import (
    CreateRoomSeekingPostRequest,
    RoomSeekingPost,
    RoomSeekingStatus,
    UpdateRoomSeekingPostRequest,
)
from ..store import EntityStore, StatePersistence


class RoomSeekingStore(EntityStore):
    """The user's room-seeking posts, public posts and the post being viewed.

    ``user_posts`` and ``current_post`` survive restarts.
    """

    name = "room-seeking"
    persisted_fields = ("user_posts", "current_post")

    def __init__(
        self,
        posts: RoomSeekingApi,
        listings: ListingsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._posts = posts
        self._listings = listings
        self.page_size = page_size
        self.user_posts = self._list(
            "my-posts", RoomSeekingPost, self._fetch_mine, fallback="Failed to load your posts"
        )
        self.public_posts = self._list(
            "public-posts", RoomSeekingPost, self._fetch_public, fallback="Failed to load public posts"
        )
        self.current_post = self._detail("detail", RoomSeekingPost, fallback="Failed to load post detail")
        self.restore()

    def _query(self, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return query

    async def _fetch_mine(self, params: Mapping[str, Any]):
        return await self._posts.mine(params, default_limit=self.page_size)

    async def _fetch_public(self, params: Mapping[str, Any]):
        return await self._listings.public_room_seeking_posts(params, default_limit=self.page_size)

    async def load_user_posts(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        return await self.user_posts.search(self._query(params), append=append, force=force)

    async def load_public_posts(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        query = self._query(params)
        # Only active, public posts are listed to other users.
        query["status"] = RoomSeekingStatus.ACTIVE.value
        query["isPublic"] = True
        return await self.public_posts.search(query, append=append, force=force)

    async def load_post_detail(self, post_id: str) -> bool:
        return await self.current_post.load(post_id, lambda: self._posts.get(post_id))

    def _replace_everywhere(self, post_id: str, post: RoomSeekingPost) -> None:
        self.user_posts.replace_by_id(post_id, post)
        if self.current_post.matches(post_id):
            self.current_post.set(post)

    async def create_post(self, data: CreateRoomSeekingPostRequest) -> bool:
        result = await self._mutate(
            "create_post",
            lambda: self._posts.create(data),
            apply=self.user_posts.prepend,
            fallback="Failed to create post",
        )
        return result.success

    async def update_post(self, post_id: str, data: UpdateRoomSeekingPostRequest) -> bool:
        result = await self._mutate(
            "update_post",
            lambda: self._posts.update(post_id, data),
            apply=lambda post: self._replace_everywhere(post_id, post),
            fallback="Failed to update post",
        )
        return result.success

    async def delete_post(self, post_id: str) -> bool:
        def apply(_: Any) -> None:
            self.user_posts.remove_by_id(post_id)
            if self.current_post.matches(post_id):
                self.current_post.set(None)

        result = await self._mutate(
            "delete_post",
            lambda: self._posts.delete(post_id),
            apply=apply,
            fallback="Failed to delete post",
        )
        return result.success

    async def toggle_post_status(self, post_id: str) -> bool:
        target = self.user_posts.find(post_id)
        if target is None and self.current_post.matches(post_id):
            target = self.current_post.record
        active = target is not None and target.status == RoomSeekingStatus.ACTIVE
        next_status = RoomSeekingStatus.PAUSED if active else RoomSeekingStatus.ACTIVE
        result = await self._mutate(
            "toggle_post_status",
            lambda: self._posts.update_status(post_id, next_status),
            apply=lambda post: self._replace_everywhere(post_id, post),
            fallback="Failed to update post status",
        )
        return result.success

    async def increment_contact(self, post_id: str) -> bool:
        def apply(_: Any) -> None:
            if self.current_post.matches(post_id):
                self.current_post.patch(contact_count=self.current_post.record.contact_count + 1)

        result = await self._mutate(
            "increment_contact",
            lambda: self._posts.increment_contact(post_id),
            apply=apply,
            fallback="Failed to record contact",
            track=False,
        )
        return result.success

    @property
    def posts(self) -> List[RoomSeekingPost]:
        return self.user_posts.items

    def clear_current_post(self) -> None:
        self.current_post.clear()


__all__ = ["RoomSeekingStore"]
