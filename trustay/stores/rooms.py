from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from ..api.endpoints import ListingsApi
from ..schemas import PaginationMeta, RoomDetail, RoomListing, RoomSearchParams
from ..store import EntityStore, StatePersistence


class RoomStore(EntityStore):
    """Featured rooms, room search results and the room being viewed."""

    name = "rooms"
    persisted_fields = ("saved_rooms",)

    def __init__(
        self,
        listings: ListingsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        featured_limit: int = 4,
        page_size: int = 20,
    ) -> None:
        super().__init__(persistence=persistence)
        self._listings = listings
        self.featured_limit = featured_limit
        self.page_size = page_size
        self.featured = self._detail("featured", RoomListing, fallback="Failed to load featured rooms")
        self.search = self._list("search", RoomListing, listings.search_rooms, fallback="Failed to search rooms")
        self.detail = self._detail("room-detail", RoomDetail, fallback="Failed to load room details")
        self.saved_rooms: List[str] = []
        self._last_search: Optional[RoomSearchParams] = None
        self.restore()

    @property
    def featured_rooms(self) -> List[RoomListing]:
        return list(self.featured.record or [])

    @property
    def search_results(self) -> List[RoomListing]:
        return self.search.items

    @property
    def search_pagination(self) -> Optional[PaginationMeta]:
        return self.search.meta

    @property
    def current_room(self) -> Optional[RoomDetail]:
        return self.detail.record

    async def load_featured(self, limit: Optional[int] = None) -> bool:
        count = limit or self.featured_limit
        return await self.featured.load(count, lambda: self._listings.featured_rooms(count))

    def _params(self, params: Union[RoomSearchParams, Mapping[str, Any], None]) -> RoomSearchParams:
        if isinstance(params, RoomSearchParams):
            return params
        values = dict(params or {})
        values.setdefault("limit", self.page_size)
        return RoomSearchParams.model_validate(values)

    async def search_rooms(
        self,
        params: Union[RoomSearchParams, Mapping[str, Any], None] = None,
        append: bool = False,
        *,
        force: bool = False,
    ) -> bool:
        resolved = self._params(params)
        applied = await self.search.search(resolved, append=append, force=force)
        if applied:
            self._last_search = resolved
        return applied

    async def load_more(self) -> bool:
        """Append the page after the current cursor, reusing the last filters."""
        meta = self.search.meta
        if meta is None or not meta.has_next or self._last_search is None:
            return False
        params = self._last_search.model_copy(update={"page": meta.page + 1})
        return await self.search_rooms(params, append=True)

    async def load_room_detail(self, slug: str) -> bool:
        return await self.detail.load(slug, lambda: self._listings.room_by_slug(slug))

    def toggle_save_room(self, room_id: str) -> bool:
        """Local bookmark only. Returns whether the room is now saved."""
        if room_id in self.saved_rooms:
            self.saved_rooms = [saved for saved in self.saved_rooms if saved != room_id]
            saved = False
        else:
            self.saved_rooms = self.saved_rooms + [room_id]
            saved = True
        self._notify()
        return saved

    def is_saved(self, room_id: str) -> bool:
        return room_id in self.saved_rooms

    def clear_search_results(self) -> None:
        self._last_search = None
        self.search.clear()

    def clear_room_detail(self) -> None:
        self.detail.clear()


__all__ = ["RoomStore"]
