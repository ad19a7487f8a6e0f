"""API tests for inventory alert endpoints."""

from datetime import date, timedelta

from httpx import AsyncClient

from tests.api.api_helpers import create_batch, create_medicine


async def test_low_stock(client: AsyncClient):
    short = await create_medicine(client, name="Insulin Glargine", reorderLevel=20)
    await create_batch(client, short["id"], quantity=5)
    plenty = await create_medicine(client, name="Paracetamol 650mg", reorderLevel=20)
    await create_batch(client, plenty["id"], quantity=500)

    body = (await client.get("/api/inventory/alerts/low-stock")).json()

    assert [a["medicine"]["name"] for a in body] == ["Insulin Glargine"]
    assert body[0]["currentStock"] == 5
    assert body[0]["reorderLevel"] == 20


async def test_expiry_window(client: AsyncClient):
    medicine = await create_medicine(client)
    soon = (date.today() + timedelta(days=20)).isoformat()
    await create_batch(client, medicine["id"], batchNumber="SOON", expiryDate=soon)
    await create_batch(client, medicine["id"], batchNumber="LATER")

    default = (await client.get("/api/inventory/alerts/expiry")).json()
    narrow = (await client.get("/api/inventory/alerts/expiry", params={"days": 10})).json()

    assert [a["batch"]["batchNumber"] for a in default] == ["SOON"]
    assert default[0]["daysUntilExpiry"] == 20
    assert narrow == []


async def test_negative_window_rejected(client: AsyncClient):
    response = await client.get("/api/inventory/alerts/expiry", params={"days": -1})

    assert response.status_code == 400
