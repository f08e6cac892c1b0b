import asyncio
import json
from datetime import datetime, timezone
from decimal import Decimal

import httpx

from trustay.api.auth import TokenManager
from trustay.api.client import ApiClient
from trustay.config import Settings
from trustay.db import Database, PersistedState, transaction_scope
from trustay.schemas import BookingStatus
from trustay.store import StatePersistence


def _persistence(namespace="test"):
    return StatePersistence(Database("sqlite:///:memory:"), namespace)


def test_save_and_load_round_trip():
    persistence = _persistence()
    assert persistence.load("rooms") is None

    assert persistence.save("rooms", {"saved_rooms": ["r1", "r2"]}) is True
    assert persistence.load("rooms") == {"saved_rooms": ["r1", "r2"]}

    assert persistence.save("rooms", {"saved_rooms": []}) is True
    assert persistence.load("rooms") == {"saved_rooms": []}


def test_values_are_normalized_to_json():
    persistence = _persistence()
    persistence.save(
        "misc",
        {
            "when": datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc),
            "amount": Decimal("3500000.50"),
            "status": BookingStatus.APPROVED,
        },
    )
    assert persistence.load("misc") == {
        "when": "2025-08-01T12:00:00Z",
        "amount": "3500000.50",
        "status": "approved",
    }


def test_namespaces_are_isolated():
    database = Database("sqlite:///:memory:")
    first = StatePersistence(database, "one")
    second = StatePersistence(database, "two")
    first.save("rooms", {"saved_rooms": ["r1"]})
    assert second.load("rooms") is None
    assert first.key_for("rooms") == "one:rooms"


def test_clear_removes_state():
    persistence = _persistence()
    persistence.save("bills", {"x": 1})
    assert persistence.clear("bills") is True
    assert persistence.load("bills") is None
    assert persistence.clear("bills") is False


def test_token_manager_persists_tokens():
    persistence = _persistence()
    settings = Settings(access_token=None)
    tokens = TokenManager(persistence, settings)
    assert tokens.is_authenticated is False

    tokens.set_tokens("access-1", "refresh-1")
    restored = TokenManager(persistence, settings)
    assert restored.get_access_token() == "access-1"
    assert restored.refresh_token == "refresh-1"

    restored.clear_tokens()
    assert TokenManager(persistence, settings).get_access_token() is None


def test_token_manager_falls_back_to_configured_token():
    tokens = TokenManager(None, Settings(access_token="static-token"))
    assert tokens.get_access_token() == "static-token"
    tokens.set_tokens("runtime-token")
    assert tokens.get_access_token() == "runtime-token"


def _client(handler):
    return ApiClient(Settings(api_base_url="http://testserver"), transport=httpx.MockTransport(handler))


def test_refresh_exchanges_refresh_token():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"access_token": "access-2", "refresh_token": "refresh-2"})

    persistence = _persistence()
    tokens = TokenManager(persistence, Settings(access_token=None))
    tokens.set_tokens("access-1", "refresh-1")
    client = _client(handler)

    async def scenario():
        try:
            return await tokens.refresh(client)
        finally:
            await client.aclose()

    assert asyncio.run(scenario()) is True
    assert bodies == [{"refreshToken": "refresh-1"}]
    assert tokens.get_access_token() == "access-2"
    assert TokenManager(persistence, Settings(access_token=None)).refresh_token == "refresh-2"


def test_rejected_refresh_signs_out():
    client = _client(lambda request: httpx.Response(401, json={"message": "Invalid refresh token"}))
    tokens = TokenManager(None, Settings(access_token=None))
    tokens.set_tokens("access-1", "refresh-1")

    async def scenario():
        try:
            return await tokens.refresh(client)
        finally:
            await client.aclose()

    assert asyncio.run(scenario()) is False
    assert tokens.get_access_token() is None
    assert tokens.refresh_token is None


def test_refresh_without_refresh_token_is_a_no_op():
    tokens = TokenManager(None, Settings(access_token="static-token"))
    assert asyncio.run(tokens.refresh(None)) is False
    assert tokens.get_access_token() == "static-token"


def test_state_rows_get_an_update_timestamp():
    database = Database("sqlite:///:memory:")
    StatePersistence(database, "ts")
    with transaction_scope(database) as session:
        session.add(PersistedState(key="ts:manual", payload={"x": 1}))
    with transaction_scope(database) as session:
        assert session.get(PersistedState, "ts:manual").updated_at is not None
