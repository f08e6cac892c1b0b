import asyncio

from trustay.schemas import RoomSearchParams
from trustay.store.guard import RequestGuard, request_key


def test_request_key_is_order_independent_and_ignores_none():
    assert request_key({"b": 2, "a": 1, "c": None}) == request_key({"a": 1, "b": 2})
    assert request_key(None) == "{}"
    assert request_key(RoomSearchParams(search="q", page=2)) == request_key(RoomSearchParams(page=2, search="q"))
    assert request_key({"page": 1}) != request_key({"page": 2})


def test_duplicate_in_flight_replace_is_skipped():
    guard = RequestGuard()
    first = guard.begin("search", "k1")
    assert first is not None
    assert guard.begin("search", "k1") is None
    assert guard.begin("search", "k1", force=True) is not None


def test_last_successful_key_is_skipped_until_reset():
    guard = RequestGuard()
    ticket = guard.begin("search", "k1")
    guard.settle(ticket, True)
    assert guard.slot("search").inflight_key is None
    assert guard.begin("search", "k1") is None

    guard.reset("search")
    assert guard.begin("search", "k1") is not None


def test_failed_request_can_be_retried():
    guard = RequestGuard()
    ticket = guard.begin("search", "k1")
    guard.settle(ticket, False)
    assert guard.begin("search", "k1") is not None


def test_newer_ticket_makes_older_stale():
    guard = RequestGuard()
    old = guard.begin("search", "k1")
    new = guard.begin("search", "k2")
    assert not guard.is_current(old)
    assert guard.is_current(new)

    guard.settle(old, True)
    assert guard.slot("search").inflight_key == "k2"
    assert guard.slot("search").last_completed_key is None


def test_slots_are_independent():
    guard = RequestGuard()
    guard.begin("received", "k1")
    assert guard.begin("mine", "k1") is not None


def test_begin_cancels_superseded_task():
    guard = RequestGuard()

    async def slow():
        guard.begin("search", "old")
        await asyncio.sleep(10)

    async def scenario():
        task = asyncio.create_task(slow())
        await asyncio.sleep(0)
        guard.begin("search", "new")
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(scenario()) is True


def test_issuing_a_new_key_forgets_the_previous_completion():
    guard = RequestGuard()
    guard.settle(guard.begin("search", "k1"), True)
    assert guard.begin("search", "k2") is not None
    assert guard.slot("search").last_completed_key is None
    assert guard.begin("search", "k1") is not None
