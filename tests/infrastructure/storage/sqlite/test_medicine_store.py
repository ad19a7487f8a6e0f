"""Tests for SQLite medicine store."""

from datetime import datetime
from decimal import Decimal

from src.core.entities import PaymentMethod, Sale, SaleItem, ScheduleType
from src.infrastructure.storage.sqlite.medicine_store import SQLiteMedicineStore
from src.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore
from tests.factories import make_medicine


class TestMedicineStore:
    async def test_create_and_get(self, medicine_store: SQLiteMedicineStore):
        medicine = make_medicine(
            schedule_type=ScheduleType.H1, unit_price=Decimal("12.50"), description="Tablet"
        )
        await medicine_store.create_medicine(medicine)

        loaded = await medicine_store.get_medicine(medicine.id)

        assert loaded is not None
        assert loaded.name == "Paracetamol 500mg"
        assert loaded.schedule_type == ScheduleType.H1
        assert loaded.unit_price == Decimal("12.5")
        assert loaded.description == "Tablet"
        assert loaded.is_active is True

    async def test_get_missing(self, medicine_store: SQLiteMedicineStore):
        assert await medicine_store.get_medicine("nope") is None

    async def test_update(self, medicine_store: SQLiteMedicineStore):
        medicine = await medicine_store.create_medicine(make_medicine())
        medicine.reorder_level = 50
        medicine.is_active = False

        await medicine_store.update_medicine(medicine)
        loaded = await medicine_store.get_medicine(medicine.id)

        assert loaded.reorder_level == 50
        assert loaded.is_active is False

    async def test_list_search_and_active_filter(self, medicine_store: SQLiteMedicineStore):
        await medicine_store.create_medicine(
            make_medicine(name="Amoxicillin 250mg", generic_name="Amoxicillin")
        )
        await medicine_store.create_medicine(make_medicine(name="Cetirizine 10mg"))
        await medicine_store.create_medicine(
            make_medicine(name="Amoxicillin 500mg", generic_name="Amoxicillin", is_active=False)
        )

        names = [m.name for m in await medicine_store.list_medicines(search="amoxi")]
        assert names == ["Amoxicillin 250mg"]

        all_names = [
            m.name
            for m in await medicine_store.list_medicines(search="amoxi", active_only=False)
        ]
        assert all_names == ["Amoxicillin 250mg", "Amoxicillin 500mg"]

    async def test_list_paginates_by_name(self, medicine_store: SQLiteMedicineStore):
        for name in ("Zinc", "Aspirin", "Metformin"):
            await medicine_store.create_medicine(make_medicine(name=name))

        page = await medicine_store.list_medicines(limit=2, offset=1)

        assert [m.name for m in page] == ["Metformin", "Zinc"]

    async def test_list_all_active_is_unpaged(self, medicine_store: SQLiteMedicineStore):
        for i in range(25):
            await medicine_store.create_medicine(make_medicine(name=f"Medicine {i:02d}"))
        await medicine_store.create_medicine(make_medicine(name="Retired", is_active=False))

        medicines = await medicine_store.list_all_active()

        assert len(medicines) == 25
        assert medicines[0].name == "Medicine 00"
        assert "Retired" not in {m.name for m in medicines}


class TestDispensingHistory:
    async def test_no_history_before_sale(
        self, medicine_store: SQLiteMedicineStore, stored_medicine
    ):
        assert await medicine_store.has_dispensing_history(stored_medicine.id) is False

    async def test_history_after_sale(
        self,
        medicine_store: SQLiteMedicineStore,
        sales_store: SQLiteSalesStore,
        stored_batch,
    ):
        sale = Sale(
            invoice_number="INV2503140001",
            items=[
                SaleItem(
                    medicine_id=stored_batch.medicine_id,
                    batch_id=stored_batch.id,
                    quantity=1,
                    unit_price=Decimal("100.00"),
                    gst_rate=Decimal("12"),
                    total=Decimal("112.00"),
                )
            ],
            subtotal=Decimal("100.00"),
            gst_amount=Decimal("12.00"),
            total_amount=Decimal("112.00"),
            payment_method=PaymentMethod.CASH,
            created_by="pharmacist-1",
            created_at=datetime(2025, 3, 14, 10, 0),
        )
        await sales_store.create_sale(sale)

        assert await medicine_store.has_dispensing_history(stored_batch.medicine_id) is True
        assert await medicine_store.has_dispensing_history("other") is False
