"""API tests for sales endpoints."""

from datetime import date

from httpx import AsyncClient

from tests.api.api_helpers import create_batch, create_medicine
from tests.factories import make_bundle


async def sell(client: AsyncClient, medicine: dict, batch: dict, quantity: int, **extra):
    return await client.post(
        "/api/sales",
        json={
            "items": [{"medicineId": medicine["id"], "batchId": batch["id"], "quantity": quantity}],
            **extra,
        },
        headers={"X-Actor-Id": "pharmacist-1"},
    )


class TestCreateSale:
    async def test_worked_example(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])

        response = await sell(client, medicine, batch, 2, discount=10, paymentMethod="UPI")

        assert response.status_code == 201
        body = response.json()
        assert body["subtotal"] == 200.0
        assert body["discountAmount"] == 20.0
        assert body["gstAmount"] == 21.6
        assert body["totalAmount"] == 201.6
        assert body["paymentMethod"] == "UPI"
        assert body["createdBy"] == "pharmacist-1"
        assert body["invoiceNumber"].startswith(f"INV{date.today():%y%m%d}")
        assert body["items"][0]["medicineName"] == "Paracetamol 500mg"
        assert body["items"][0]["gstRate"] == 12.0

        stock = await client.get(f"/api/medicines/{medicine['id']}/stock")
        assert stock.json()["totalQuantity"] == 98

    async def test_invoice_numbers_increase(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])

        first = (await sell(client, medicine, batch, 1)).json()["invoiceNumber"]
        second = (await sell(client, medicine, batch, 1)).json()["invoiceNumber"]

        assert first[-4:] == "0001"
        assert second[-4:] == "0002"

    async def test_anonymous_actor(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])

        response = await client.post(
            "/api/sales",
            json={"items": [{"medicineId": medicine["id"], "batchId": batch["id"], "quantity": 1}]},
        )

        assert response.json()["createdBy"] == "anonymous"

    async def test_schedule_h_without_prescription(self, client: AsyncClient):
        medicine = await create_medicine(client, scheduleType="H")
        batch = await create_batch(client, medicine["id"])

        response = await sell(client, medicine, batch, 1)

        assert response.status_code == 400
        body = response.json()
        assert body["errorCode"] == "COMPLIANCE_VIOLATION"
        assert body["details"]["errors"] == [
            "Prescription required for Schedule H medicine",
            "Doctor verification required for Schedule H medicine",
        ]

        stock = await client.get(f"/api/medicines/{medicine['id']}/stock")
        assert stock.json()["totalQuantity"] == 100

    async def test_schedule_h_with_uploaded_prescription(self, client: AsyncClient):
        medicine = await create_medicine(client, scheduleType="H")
        batch = await create_batch(client, medicine["id"])
        upload = await client.post(
            "/api/prescriptions/upload", json={"fhirBundle": make_bundle()}
        )
        prescription_id = upload.json()["id"]

        response = await sell(client, medicine, batch, 1, prescriptionId=prescription_id)

        assert response.status_code == 201
        assert response.json()["prescription"]["id"] == prescription_id

    async def test_insufficient_stock(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"], quantity=3)

        response = await sell(client, medicine, batch, 5)

        assert response.status_code == 400
        assert response.json()["errorCode"] == "INSUFFICIENT_STOCK"
        assert (await client.get("/api/sales")).json()["sales"] == []

    async def test_empty_items(self, client: AsyncClient):
        response = await client.post("/api/sales", json={"items": []})

        assert response.status_code == 400
        assert response.json()["errorCode"] == "EMPTY_SALE"

    async def test_unknown_medicine(self, client: AsyncClient):
        response = await client.post(
            "/api/sales",
            json={"items": [{"medicineId": "nope", "batchId": "nope", "quantity": 1}]},
        )

        assert response.status_code == 404
        assert response.json()["errorCode"] == "MEDICINE_NOT_FOUND"

    async def test_discount_out_of_range(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])

        response = await sell(client, medicine, batch, 1, discount=150)

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"


class TestQueries:
    async def test_get_and_list(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])
        for _ in range(3):
            await sell(client, medicine, batch, 1)

        listing = (await client.get("/api/sales", params={"limit": 2})).json()
        assert len(listing["sales"]) == 2
        assert listing["hasMore"] is True

        sale_id = listing["sales"][0]["id"]
        fetched = await client.get(f"/api/sales/{sale_id}")
        assert fetched.status_code == 200
        assert fetched.json()["items"][0]["batchNumber"] == "B001"

    async def test_get_missing(self, client: AsyncClient):
        response = await client.get("/api/sales/missing")

        assert response.status_code == 404
        assert response.json()["errorCode"] == "SALE_NOT_FOUND"

    async def test_report(self, client: AsyncClient):
        medicine = await create_medicine(client)
        batch = await create_batch(client, medicine["id"])
        await sell(client, medicine, batch, 2, discount=10)
        await sell(client, medicine, batch, 1)
        today = date.today().isoformat()

        response = await client.get(
            "/api/sales/reports/summary", params={"startDate": today, "endDate": today}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["totalSales"] == 2
        assert body["totalRevenue"] == 313.6
        assert body["itemsSold"] == 3

    async def test_report_requires_dates(self, client: AsyncClient):
        response = await client.get("/api/sales/reports/summary")

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "startDate"


class TestValidateDispensing:
    async def test_schedule_x_limit(self, client: AsyncClient):
        medicine = await create_medicine(client, scheduleType="X")
        upload = await client.post(
            "/api/prescriptions/upload", json={"fhirBundle": make_bundle()}
        )

        response = await client.post(
            "/api/sales/validate-dispensing",
            json={
                "medicineId": medicine["id"],
                "quantity": 40,
                "prescriptionId": upload.json()["id"],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["allowed"] is False
        assert body["errors"] == ["Quantity 40 exceeds maximum allowed (30) for Schedule X"]
        assert body["warnings"]

    async def test_otc_allowed(self, client: AsyncClient):
        medicine = await create_medicine(client)

        response = await client.post(
            "/api/sales/validate-dispensing",
            json={"medicineId": medicine["id"], "quantity": 2},
        )

        assert response.json() == {"allowed": True, "warnings": [], "errors": []}
