import asyncio
from decimal import Decimal

from trustay.api.result import ApiFailure, ApiSuccess
from trustay.db import Database
from trustay.schemas import (
    CreateRoomSeekingPostRequest,
    ListPage,
    PaginationMeta,
    RoomSeekingPost,
    RoomSeekingStatus,
    UpdateRoomSeekingPostRequest,
)
from trustay.store import StatePersistence
from trustay.stores import RoomSeekingStore


def _post(post_id, **fields):
    return RoomSeekingPost(id=post_id, title=fields.pop("title", f"Post {post_id}"), **fields)


def _listing(posts, page=1, limit=20):
    meta = PaginationMeta.synthesize(page=page, limit=limit, total=len(posts), item_count=len(posts))
    return ApiSuccess(ListPage(data=list(posts), meta=meta))


class FakePostsApi:
    def __init__(self):
        self.posts = [_post("p1", status=RoomSeekingStatus.ACTIVE), _post("p2", status=RoomSeekingStatus.PAUSED)]
        self.calls = []
        self.fail_with = None

    def _failure(self):
        return ApiFailure(error=self.fail_with, status=400)

    async def mine(self, params, default_limit=None):
        self.calls.append(("mine", dict(params)))
        return _listing(self.posts)

    async def get(self, post_id):
        self.calls.append(("get", post_id))
        if self.fail_with:
            return self._failure()
        return ApiSuccess(next(post for post in self.posts if post.id == post_id))

    async def create(self, data):
        self.calls.append(("create", data))
        if self.fail_with:
            return self._failure()
        return ApiSuccess(_post("p-new", title=data.title, description=data.description))

    async def update(self, post_id, data):
        self.calls.append(("update", post_id))
        if self.fail_with:
            return self._failure()
        return ApiSuccess(_post(post_id, title=data.title))

    async def update_status(self, post_id, status):
        self.calls.append(("update_status", post_id, status))
        if self.fail_with:
            return self._failure()
        return ApiSuccess(_post(post_id, status=status))

    async def delete(self, post_id):
        self.calls.append(("delete", post_id))
        if self.fail_with:
            return self._failure()
        return ApiSuccess({"message": "deleted"})

    async def increment_contact(self, post_id):
        self.calls.append(("increment_contact", post_id))
        if self.fail_with:
            return self._failure()
        return ApiSuccess({"message": "ok"})


class FakeListingsApi:
    def __init__(self):
        self.params = []

    async def public_room_seeking_posts(self, params, default_limit=None):
        self.params.append(dict(params))
        return _listing([_post("public-1")])


def _create_request(**overrides):
    values = dict(
        title="Looking for a studio",
        description="Near district 1",
        preferred_province_id=1,
        preferred_district_id=2,
        preferred_ward_id=3,
        min_budget=Decimal("2000000"),
        max_budget=Decimal("4000000"),
        occupancy=1,
    )
    values.update(overrides)
    return CreateRoomSeekingPostRequest(**values)


def _store(persistence=None):
    posts = FakePostsApi()
    store = RoomSeekingStore(posts, FakeListingsApi(), persistence=persistence)
    return store, posts


def test_failed_create_leaves_posts_unchanged():
    store, posts = _store()

    async def scenario():
        await store.load_user_posts()
        before = list(store.posts)
        posts.fail_with = "Title already used"
        created = await store.create_post(_create_request())
        return before, created

    before, created = asyncio.run(scenario())
    assert created is False
    assert store.posts == before
    assert store.submit_error == "Title already used"
    assert store.submitting is False


def test_successful_create_prepends_backend_entity():
    store, _ = _store()

    async def scenario():
        await store.load_user_posts()
        return await store.create_post(_create_request())

    assert asyncio.run(scenario()) is True
    assert [post.id for post in store.posts] == ["p-new", "p1", "p2"]
    assert store.posts[0].title == "Looking for a studio"
    assert store.submit_error is None


def test_update_replaces_list_entry_and_current_post():
    store, _ = _store()

    async def scenario():
        await store.load_user_posts()
        await store.load_post_detail("p1")
        return await store.update_post("p1", UpdateRoomSeekingPostRequest(title="Renamed"))

    assert asyncio.run(scenario()) is True
    assert store.user_posts.find("p1").title == "Renamed"
    assert store.current_post.record.title == "Renamed"


def test_delete_removes_post_and_clears_matching_detail():
    store, _ = _store()

    async def scenario():
        await store.load_user_posts()
        await store.load_post_detail("p2")
        return await store.delete_post("p2")

    assert asyncio.run(scenario()) is True
    assert [post.id for post in store.posts] == ["p1"]
    assert store.current_post.record is None


def test_failed_delete_keeps_post():
    store, posts = _store()

    async def scenario():
        await store.load_user_posts()
        posts.fail_with = "Not allowed"
        return await store.delete_post("p1")

    assert asyncio.run(scenario()) is False
    assert [post.id for post in store.posts] == ["p1", "p2"]
    assert store.submit_error == "Not allowed"


def test_toggle_status_flips_between_active_and_paused():
    store, posts = _store()

    async def scenario():
        await store.load_user_posts()
        await store.toggle_post_status("p1")
        await store.toggle_post_status("p2")

    asyncio.run(scenario())
    statuses = [call[2] for call in posts.calls if call[0] == "update_status"]
    assert statuses == [RoomSeekingStatus.PAUSED, RoomSeekingStatus.ACTIVE]
    assert store.user_posts.find("p1").status == RoomSeekingStatus.PAUSED
    assert store.user_posts.find("p2").status == RoomSeekingStatus.ACTIVE


def test_increment_contact_updates_current_post_only_after_success():
    store, posts = _store()

    async def scenario():
        await store.load_post_detail("p1")
        await store.increment_contact("p1")
        posts.fail_with = "Rate limited"
        await store.increment_contact("p1")

    asyncio.run(scenario())
    assert store.current_post.record.contact_count == 1


def test_public_posts_are_restricted_to_active_public():
    listings = FakeListingsApi()
    store = RoomSeekingStore(FakePostsApi(), listings)
    asyncio.run(store.load_public_posts({"page": 1, "status": "closed"}))
    assert listings.params == [{"page": 1, "limit": 20, "status": "active", "isPublic": True}]
    assert [post.id for post in store.public_posts.items] == ["public-1"]


def test_clear_current_post_and_form_errors():
    store, posts = _store()

    async def scenario():
        await store.load_post_detail("p1")
        posts.fail_with = "Invalid"
        await store.update_post("p1", UpdateRoomSeekingPostRequest(title="x"))

    asyncio.run(scenario())
    assert store.submit_error == "Invalid"
    store.clear_form_errors()
    assert store.submit_error is None
    store.clear_current_post()
    assert store.current_post.record is None


def test_persisted_subset_survives_restart(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'state.db'}")
    persistence = StatePersistence(database, "test")
    store, _ = _store(persistence)

    async def scenario():
        await store.load_user_posts()
        await store.load_post_detail("p2")
        await store.load_public_posts()

    asyncio.run(scenario())

    snapshot = persistence.load("room-seeking")
    assert set(snapshot) == {"user_posts", "current_post"}
    assert "loading" not in str(snapshot)
    assert "error" not in str(snapshot)

    restored, _ = _store(persistence)
    assert [post.id for post in restored.posts] == ["p1", "p2"]
    assert restored.current_post.record.id == "p2"
    assert restored.public_posts.items == []
    assert restored.user_posts.loading is False
    assert restored.user_posts.error is None
    database.dispose()
