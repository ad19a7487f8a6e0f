"""Tests for SQLite sales store."""

from datetime import date, datetime
from decimal import Decimal

from src.core.entities import PaymentMethod, Sale, SaleItem
from src.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore


def make_sale(batch, created_at, invoice_number, quantity=2, total="224.00", gst="24.00"):
    return Sale(
        invoice_number=invoice_number,
        items=[
            SaleItem(
                medicine_id=batch.medicine_id,
                batch_id=batch.id,
                quantity=quantity,
                unit_price=Decimal("100.00"),
                gst_rate=Decimal("12"),
                total=Decimal(total),
            )
        ],
        subtotal=Decimal("200.00"),
        gst_amount=Decimal(gst),
        total_amount=Decimal(total),
        payment_method=PaymentMethod.CARD,
        created_by="pharmacist-1",
        created_at=created_at,
    )


class TestInvoiceSequence:
    async def test_counts_per_day(self, sales_store: SQLiteSalesStore):
        assert await sales_store.next_invoice_sequence("2025-03-14") == 1
        assert await sales_store.next_invoice_sequence("2025-03-14") == 2
        assert await sales_store.next_invoice_sequence("2025-03-15") == 1
        assert await sales_store.next_invoice_sequence("2025-03-14") == 3


class TestSales:
    async def test_create_and_get(self, sales_store: SQLiteSalesStore, stored_batch):
        sale = make_sale(stored_batch, datetime(2025, 3, 14, 10, 30), "INV2503140001")
        await sales_store.create_sale(sale)

        loaded = await sales_store.get_sale(sale.id)

        assert loaded.invoice_number == "INV2503140001"
        assert loaded.total_amount == Decimal("224.00")
        assert loaded.payment_method == PaymentMethod.CARD
        assert len(loaded.items) == 1
        assert loaded.items[0].sale_id == sale.id
        assert loaded.items[0].gst_rate == Decimal("12.0")

    async def test_get_missing(self, sales_store: SQLiteSalesStore):
        assert await sales_store.get_sale("missing") is None

    async def test_list_newest_first_with_range(
        self, sales_store: SQLiteSalesStore, stored_batch
    ):
        for day, number in ((10, "A"), (12, "B"), (14, "C")):
            await sales_store.create_sale(
                make_sale(stored_batch, datetime(2025, 3, day, 9, 0), number)
            )

        everything = await sales_store.list_sales()
        assert [s.invoice_number for s in everything] == ["C", "B", "A"]

        ranged = await sales_store.list_sales(
            start=datetime(2025, 3, 11), end=datetime(2025, 3, 14, 23, 59)
        )
        assert [s.invoice_number for s in ranged] == ["C", "B"]

        page = await sales_store.list_sales(limit=1, offset=1)
        assert [s.invoice_number for s in page] == ["B"]


class TestSalesReport:
    async def test_inclusive_range(self, sales_store: SQLiteSalesStore, stored_batch):
        await sales_store.create_sale(
            make_sale(stored_batch, datetime(2025, 1, 1, 0, 0), "A", quantity=1)
        )
        await sales_store.create_sale(
            make_sale(stored_batch, datetime(2025, 1, 31, 23, 59), "B", quantity=3)
        )
        await sales_store.create_sale(
            make_sale(stored_batch, datetime(2025, 2, 1, 0, 0), "C", quantity=5)
        )

        report = await sales_store.sales_report(date(2025, 1, 1), date(2025, 1, 31))

        assert report.total_sales == 2
        assert report.total_revenue == Decimal("448.0")
        assert report.total_gst == Decimal("48.0")
        assert report.items_sold == 4

    async def test_empty_range(self, sales_store: SQLiteSalesStore):
        report = await sales_store.sales_report(date(2025, 1, 1), date(2025, 1, 31))

        assert report.total_sales == 0
        assert report.total_revenue == Decimal("0")
        assert report.items_sold == 0
