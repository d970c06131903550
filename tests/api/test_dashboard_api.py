"""API tests for GET /api/dashboard/stats."""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from po_tracker.main import create_app

pytestmark = pytest.mark.integration


@pytest.fixture
async def client(engine):
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_empty_dashboard_returns_empty_arrays(client):
    response = await client.get("/api/dashboard/stats")

    assert response.status_code == 200
    assert response.json() == {
        "oldest_pending_date": None,
        "pending_items_count": 0,
        "monthly_dispatched_weight": [],
    }


async def test_dashboard_reflects_stage_updates(client, make_item, make_order):
    item = await make_item(weight=2.5)
    pending = await make_order(datetime(2024, 2, 1), [{"item_id": item.id, "quantity": 4}], po_number="PO-2")
    shipped = await make_order(
        datetime(2024, 1, 1),
        [{"item_id": item.id, "quantity": 4}],
        delivery_date=datetime(2024, 5, 10),
        po_number="PO-1",
    )

    before = (await client.get("/api/dashboard/stats")).json()
    assert before["pending_items_count"] == 2
    assert before["oldest_pending_date"].startswith("2024-01-01")

    await client.patch(
        f"/api/purchase-order-items/{shipped.items[0].id}/process",
        json={"stage_index": 9, "completed": True},
    )

    after = (await client.get("/api/dashboard/stats")).json()
    assert after["pending_items_count"] == 1
    assert after["oldest_pending_date"].startswith("2024-02-01")
    assert after["monthly_dispatched_weight"] == [{"month": "2024-05", "weight": 10.0}]
    assert pending.items[0].id != shipped.items[0].id


async def test_offset_delivery_date_bucketed_by_utc_month(client, make_item):
    item = await make_item(weight=1.5)
    created = await client.post(
        "/api/purchase-orders",
        json={
            "po_number": "PO-IST",
            "vendor_name": "OTHER",
            "order_date": "2024-05-20T09:00:00+05:30",
            "delivery_date": "2024-06-01T00:30:00+05:30",
            "items": [{"item_id": item.id, "quantity": 2}],
        },
    )
    assert created.status_code == 201
    line_id = created.json()["items"][0]["id"]

    await client.patch(
        f"/api/purchase-order-items/{line_id}/process",
        json={"stage_index": 9, "completed": True},
    )

    stats = (await client.get("/api/dashboard/stats")).json()
    assert stats["monthly_dispatched_weight"] == [{"month": "2024-05", "weight": 3.0}]
