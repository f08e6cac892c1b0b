import asyncio
from decimal import Decimal

import httpx

from trustay.api.client import ApiClient
from trustay.api.endpoints import BillsApi
from trustay.config import Settings
from trustay.schemas import BillStatus, UpdateBillRequest
from trustay.stores import BillStore


def _bill(bill_id, **fields):
    payload = {
        "id": bill_id,
        "billingPeriod": "2025-08",
        "totalAmount": {"s": 1, "e": 6, "d": [3500000]},
        "paidAmount": {"s": 1, "e": 0, "d": [0]},
        "status": "pending",
        "billItems": [
            {"itemName": "Rent", "amount": {"s": 1, "e": 6, "d": [3000000]}},
            {"itemName": "Electricity", "amount": {"s": 1, "e": 5, "d": [5, 0, 0, 0, 0, 0]}, "quantity": {"s": 1, "e": 2, "d": [125]}},
        ],
    }
    payload.update(fields)
    return payload


def _store(handler):
    client = ApiClient(Settings(api_base_url="http://testserver"), transport=httpx.MockTransport(handler))
    return BillStore(BillsApi(client)), client


def _run(client, coro_factory):
    async def scenario():
        try:
            return await coro_factory()
        finally:
            await client.aclose()

    return asyncio.run(scenario())


def test_bill_amounts_are_decoded_from_decimal_objects():
    def handler(request):
        return httpx.Response(
            200,
            json={"data": [_bill("bill-1")], "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1}},
        )

    store, client = _store(handler)
    assert _run(client, store.load_bills) is True
    bill = store.bills.items[0]
    assert bill.total_amount == Decimal("3500000")
    assert bill.paid_amount == Decimal("0")
    assert bill.bill_items[1].amount == Decimal("500000")
    assert bill.bill_items[1].quantity == Decimal("125")
    assert store.bills.meta.total == 1
    assert store.bills.meta.has_next is False


def test_mark_paid_replaces_the_listed_bill():
    def handler(request):
        if request.url.path == "/api/bills/bill-1/mark-paid":
            return httpx.Response(200, json={"data": _bill("bill-1", status="paid", paidAmount={"s": 1, "e": 6, "d": [3500000]})})
        return httpx.Response(200, json=[_bill("bill-1"), _bill("bill-2")])

    store, client = _store(handler)

    async def scenario():
        await store.load_bills()
        return await store.mark_paid("bill-1")

    assert _run(client, scenario) is True
    paid = store.bills.find("bill-1")
    assert paid.status == BillStatus.PAID
    assert paid.paid_amount == Decimal("3500000")
    assert store.bills.find("bill-2").status == BillStatus.PENDING


def test_failed_update_leaves_bills_untouched():
    def handler(request):
        if request.method == "PATCH":
            return httpx.Response(422, json={"message": ["dueDate must be a date", "notes too long"]})
        return httpx.Response(200, json=[_bill("bill-1", notes="original")])

    store, client = _store(handler)

    async def scenario():
        await store.load_bills()
        return await store.update("bill-1", UpdateBillRequest(notes="x" * 600))

    assert _run(client, scenario) is False
    assert store.bills.find("bill-1").notes == "original"
    assert "dueDate must be a date" in store.submit_error
    assert store.submitting is False


def test_remove_drops_bill_and_current_record():
    def handler(request):
        if request.method == "DELETE":
            return httpx.Response(200, json={"message": "deleted"})
        if request.url.path == "/api/bills/bill-2":
            return httpx.Response(200, json=_bill("bill-2"))
        return httpx.Response(200, json=[_bill("bill-1"), _bill("bill-2")])

    store, client = _store(handler)

    async def scenario():
        await store.load_bills()
        await store.load_by_id("bill-2")
        assert store.current.record.id == "bill-2"
        return await store.remove("bill-2")

    assert _run(client, scenario) is True
    assert [bill.id for bill in store.bills.items] == ["bill-1"]
    assert store.current.record is None
