import asyncio

import httpx

from trustay.api.client import ApiClient, clean_params, create_api_call, precondition_failure
from trustay.api.errors import TIMEOUT_MESSAGE
from trustay.config import Settings


def _client(handler, token_provider=None):
    settings = Settings(api_base_url="http://testserver", request_timeout_seconds=5.0)
    return ApiClient(settings, token_provider=token_provider, transport=httpx.MockTransport(handler))


def _run(client, coro_factory):
    async def scenario():
        try:
            return await coro_factory(client)
        finally:
            await client.aclose()

    return asyncio.run(scenario())


def test_clean_params_drops_none_and_lowercases_booleans():
    assert clean_params({"page": 1, "status": None, "isPublic": True, "isVerified": False}) == {
        "page": 1,
        "isPublic": "true",
        "isVerified": "false",
    }
    assert clean_params(None) == {}


def test_request_sends_bearer_token_and_query():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["params"] = dict(request.url.params)
        seen["path"] = request.url.path
        return httpx.Response(200, json={"data": {"id": "r1"}})

    client = _client(handler, token_provider=lambda: "secret")
    result = _run(client, lambda c: c.request("/api/rooms", params={"page": 2, "search": None, "isPublic": True}))

    assert result.success is True
    assert result.data == {"data": {"id": "r1"}}
    assert seen == {"auth": "Bearer secret", "params": {"page": "2", "isPublic": "true"}, "path": "/api/rooms"}


def test_request_without_token_sends_no_authorization_header():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    client = _client(handler, token_provider=lambda: None)
    result = _run(client, lambda c: c.request("/api/listings/rooms"))
    assert result.success is True
    assert seen["auth"] is None


def test_explicit_token_wins_and_async_provider_is_awaited():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    async def provider():
        return "from-provider"

    client = _client(handler, token_provider=provider)

    async def calls(c):
        await c.request("/a")
        await c.request("/b", token="explicit")

    _run(client, calls)
    assert seen == ["Bearer from-provider", "Bearer explicit"]


def test_backend_message_is_passed_through_for_4xx():
    def handler(request):
        return httpx.Response(400, json={"message": "Move-in date must be in the future"})

    result = _run(_client(handler), lambda c: c.request("/api/booking-requests", "POST", json={}))
    assert result.success is False
    assert result.error == "Move-in date must be in the future"
    assert result.status == 400


def test_validation_message_lists_are_joined():
    def handler(request):
        return httpx.Response(422, json={"message": ["title should not be empty", "occupancy must be positive"]})

    result = _run(_client(handler), lambda c: c.request("/api/room-seeking-posts", "POST", json={}))
    assert result.error == "Invalid data:\ntitle should not be empty\noccupancy must be positive"


def test_server_error_hides_backend_message_and_keeps_status():
    def handler(request):
        return httpx.Response(503, json={"message": "database exploded"})

    result = _run(_client(handler), lambda c: c.request("/api/bills", fallback="Failed to load bills"))
    assert result.success is False
    assert result.status == 503
    assert "database" not in result.error


def test_status_messages_override_generic_table():
    def handler(request):
        return httpx.Response(404, text="")

    result = _run(
        _client(handler),
        lambda c: c.request("/api/rooms/public/missing", status_messages={404: "Room not found"}),
    )
    assert result.error == "Room not found"
    assert result.status == 404


def test_timeout_maps_to_timeout_message():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    result = _run(_client(handler), lambda c: c.request("/api/rentals"))
    assert result.success is False
    assert result.error == TIMEOUT_MESSAGE
    assert result.status is None


def test_transport_error_maps_to_fallback():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = _run(_client(handler), lambda c: c.request("/api/rentals", fallback="Failed to load rentals"))
    assert result.error == "Failed to load rentals"


def test_decode_failure_becomes_failure_result():
    def handler(request):
        return httpx.Response(200, json={"unexpected": True})

    def decode(raw):
        raise ValueError("Unexpected list payload")

    result = _run(_client(handler), lambda c: c.request("/api/contracts", fallback="Failed", decode=decode))
    assert result.success is False
    assert result.error == "Failed"


def test_bytes_response_and_empty_body():
    def handler(request):
        if request.url.path.endswith("/download"):
            return httpx.Response(200, content=b"%PDF-1.7", headers={"Content-Type": "application/pdf"})
        return httpx.Response(204)

    async def calls(c):
        pdf = await c.request("/api/contracts/c1/download", response_type="bytes")
        deleted = await c.request("/api/contracts/c1", "DELETE")
        return pdf, deleted

    pdf, deleted = _run(_client(handler), calls)
    assert pdf.data == b"%PDF-1.7"
    assert deleted.success is True
    assert deleted.data is None


def test_create_api_call_uses_settings_base_url():
    settings = Settings(api_base_url="http://api.example.test/")
    client = create_api_call(lambda: None, settings=settings)
    try:
        assert client.base_url == "http://api.example.test"
        assert client.timeout == settings.request_timeout_seconds
    finally:
        asyncio.run(client.aclose())


def test_precondition_failure_has_no_status():
    result = precondition_failure("Invalid room id")
    assert result.success is False
    assert result.error == "Invalid room id"
    assert result.status is None
