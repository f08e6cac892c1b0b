import asyncio
import math

import httpx

from trustay.api.client import ApiClient
from trustay.api.endpoints import ListingsApi
from trustay.config import Settings
from trustay.db import Database
from trustay.store import StatePersistence
from trustay.stores import RoomStore

TOTAL_ROOMS = 60


class ListingsBackend:
    def __init__(self, total=TOTAL_ROOMS):
        self.total = total
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        path = request.url.path
        if path == "/api/listings/rooms":
            params = request.url.params
            page = int(params.get("page", 1))
            limit = int(params.get("limit", 20))
            start = (page - 1) * limit
            rooms = [
                {"id": f"room-{index}", "slug": f"room-{index}", "name": f"Room {index}"}
                for index in range(start, min(start + limit, self.total))
            ]
            total_pages = math.ceil(self.total / limit)
            return httpx.Response(
                200,
                json={
                    "data": rooms,
                    "meta": {
                        "page": page,
                        "limit": limit,
                        "total": self.total,
                        "totalPages": total_pages,
                        "hasNext": page < total_pages,
                        "hasPrev": page > 1,
                        "itemCount": len(rooms),
                    },
                },
            )
        if path == "/api/rooms/public/sunny-room":
            return httpx.Response(
                200,
                json={
                    "id": "room-1",
                    "slug": "sunny-room",
                    "name": "Sunny room",
                    "pricing": {"basePriceMonthly": "3500000", "depositAmount": "3500000"},
                },
            )
        return httpx.Response(404, json={"message": "Room not found"})


def _store(backend, persistence=None):
    settings = Settings(api_base_url="http://testserver")
    client = ApiClient(settings, transport=httpx.MockTransport(backend))
    return RoomStore(ListingsApi(client), persistence=persistence, featured_limit=4, page_size=20), client


def _run(client, scenario):
    async def wrapper():
        try:
            return await scenario()
        finally:
            await client.aclose()

    return asyncio.run(wrapper())


def test_three_pages_accumulate_sixty_rooms():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        assert await store.search_rooms({"page": 1})
        assert await store.search_rooms({"page": 2}, append=True)
        assert await store.search_rooms({"page": 3}, append=True)

    _run(client, scenario)

    assert len(store.search_results) == 60
    assert [room.id for room in store.search_results] == [f"room-{index}" for index in range(60)]
    meta = store.search_pagination
    assert meta.page == 3
    assert meta.has_next is False
    assert meta.has_prev is True
    assert meta.total == 60
    assert meta.item_count == 20


def test_search_sends_default_search_term():
    backend = ListingsBackend()
    store, client = _store(backend)
    _run(client, lambda: store.search_rooms({"page": 1, "minPrice": 1000000}))

    params = backend.requests[0].url.params
    assert params["search"] == "."
    assert params["minPrice"] == "1000000"
    assert params["limit"] == "20"


def test_load_more_uses_last_filters():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        await store.search_rooms({"search": "district 1", "page": 1})
        assert await store.load_more()
        assert await store.load_more()
        return await store.load_more()

    assert _run(client, scenario) is False
    assert len(store.search_results) == 60
    assert {request.url.params["search"] for request in backend.requests} == {"district 1"}


def test_duplicate_search_hits_backend_once():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        await asyncio.gather(store.search_rooms({"page": 1}), store.search_rooms({"page": 1}))

    _run(client, scenario)
    assert len(backend.requests) == 1
    assert len(store.search_results) == 20


def test_featured_rooms_are_limited():
    backend = ListingsBackend()
    store, client = _store(backend)
    assert _run(client, store.load_featured) is True
    assert [room.id for room in store.featured_rooms] == ["room-0", "room-1", "room-2", "room-3"]
    assert backend.requests[0].url.params["sortBy"] == "createdAt"


def test_room_detail_load_and_clear():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        assert await store.load_room_detail("sunny-room")
        assert store.current_room.pricing.base_price_monthly == 3500000
        assert not await store.load_room_detail("missing")

    _run(client, scenario)
    assert store.detail.error == "Room not found"
    assert store.current_room is not None

    store.clear_errors()
    assert store.detail.error is None
    store.clear_room_detail()
    assert store.current_room is None


def test_clear_search_results_allows_same_query_again():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        await store.search_rooms({"page": 1})
        store.clear_search_results()
        assert store.search_results == []
        return await store.search_rooms({"page": 1})

    assert _run(client, scenario) is True
    assert len(backend.requests) == 2


def test_saved_rooms_persist(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'state.db'}")
    persistence = StatePersistence(database, "test")
    backend = ListingsBackend()
    store, client = _store(backend, persistence)

    assert store.toggle_save_room("room-1") is True
    assert store.toggle_save_room("room-2") is True
    assert store.toggle_save_room("room-1") is False
    asyncio.run(client.aclose())

    restored, other_client = _store(backend, persistence)
    asyncio.run(other_client.aclose())
    assert restored.saved_rooms == ["room-2"]
    assert restored.is_saved("room-2")
    database.dispose()


def test_load_more_follows_filter_the_user_returned_to():
    backend = ListingsBackend()
    store, client = _store(backend)

    async def scenario():
        assert await store.search_rooms({"search": "district 1", "page": 1})
        assert await store.search_rooms({"search": "district 3", "page": 1})
        assert await store.search_rooms({"search": "district 1", "page": 1})
        return await store.load_more()

    assert _run(client, scenario) is True
    assert len(store.search_results) == 40
    assert backend.requests[-1].url.params["search"] == "district 1"
    assert backend.requests[-1].url.params["page"] == "2"
