"""SQLite implementation of sales storage."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.sale import PaymentMethod, Sale, SaleItem, SalesReport
from src.core.interfaces.sales_store import ISalesStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _money(value) -> Decimal:
    return Decimal(str(value or 0))


class SQLiteSalesStore(ISalesStore):
    """SQLite implementation of sale storage."""

    async def next_invoice_sequence(self, day_key: str) -> int:
        """
        Bump and return the per-day invoice counter.

        The upsert takes the database write lock, so concurrent sales on
        the same day get distinct numbers.
        """
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO invoice_sequences (day_key, last_seq) VALUES (?, 1)
                ON CONFLICT(day_key) DO UPDATE SET last_seq = last_seq + 1
                """,
                (day_key,),
            )
            cursor = await conn.execute(
                "SELECT last_seq FROM invoice_sequences WHERE day_key = ?",
                (day_key,),
            )
            row = await cursor.fetchone()
            return int(row["last_seq"])

    async def create_sale(self, sale: Sale) -> Sale:
        """Create a sale with all its items."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO sales (
                    id, invoice_number, prescription_id, customer_name,
                    subtotal, discount_percent, discount_amount,
                    gst_amount, total_amount, payment_method,
                    created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.id,
                    sale.invoice_number,
                    sale.prescription_id,
                    sale.customer_name,
                    float(sale.subtotal),
                    float(sale.discount_percent),
                    float(sale.discount_amount),
                    float(sale.gst_amount),
                    float(sale.total_amount),
                    sale.payment_method.value,
                    sale.created_by,
                    sale.created_at.isoformat(),
                ),
            )

            for item in sale.items:
                item.sale_id = sale.id
                await conn.execute(
                    """
                    INSERT INTO sale_items (
                        id, sale_id, medicine_id, batch_id,
                        quantity, unit_price, gst_rate, total
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.id,
                        item.sale_id,
                        item.medicine_id,
                        item.batch_id,
                        item.quantity,
                        float(item.unit_price),
                        float(item.gst_rate),
                        float(item.total),
                    ),
                )

        logger.debug(
            "sale_persisted",
            sale_id=sale.id,
            invoice_number=sale.invoice_number,
            items=len(sale.items),
        )
        return sale

    async def get_sale(self, sale_id: str) -> Sale | None:
        """Get sale by ID with items."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
            row = await cursor.fetchone()
            if row is None:
                return None

            items = await self._load_items(conn, sale_id)
            return self._row_to_sale(row, items)

    async def list_sales(
        self,
        limit: int = 100,
        offset: int = 0,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Sale]:
        """List sales with pagination, newest first."""
        clauses = []
        params: list = []
        if start:
            clauses.append("created_at >= ?")
            params.append(start.isoformat())
        if end:
            clauses.append("created_at <= ?")
            params.append(end.isoformat())

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM sales
                {where}
                ORDER BY created_at DESC, invoice_number DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()

            sales = []
            for row in rows:
                items = await self._load_items(conn, row["id"])
                sales.append(self._row_to_sale(row, items))
            return sales

    async def sales_report(
        self, start: date | None = None, end: date | None = None
    ) -> SalesReport:
        """Aggregate sale counts and amounts for an inclusive date range."""
        clauses = []
        params: list = []
        if start:
            clauses.append("s.created_at >= ?")
            params.append(datetime.combine(start, time.min).isoformat())
        if end:
            # Inclusive end day
            clauses.append("s.created_at < ?")
            params.append(datetime.combine(end + timedelta(days=1), time.min).isoformat())

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT COUNT(*) AS total_sales,
                       COALESCE(SUM(s.total_amount), 0) AS total_revenue,
                       COALESCE(SUM(s.gst_amount), 0) AS total_gst
                FROM sales s
                {where}
                """,
                params,
            )
            totals = await cursor.fetchone()

            cursor = await conn.execute(
                f"""
                SELECT COALESCE(SUM(i.quantity), 0) AS items_sold
                FROM sale_items i
                JOIN sales s ON s.id = i.sale_id
                {where}
                """,
                params,
            )
            items = await cursor.fetchone()

        return SalesReport(
            total_sales=int(totals["total_sales"]),
            total_revenue=_money(round(totals["total_revenue"], 2)),
            total_gst=_money(round(totals["total_gst"], 2)),
            items_sold=int(items["items_sold"]),
        )

    async def _load_items(self, conn: aiosqlite.Connection, sale_id: str) -> list[SaleItem]:
        cursor = await conn.execute(
            "SELECT * FROM sale_items WHERE sale_id = ? ORDER BY rowid",
            (sale_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_sale_item(r) for r in rows]

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row, items: list[SaleItem]) -> Sale:
        """Convert a database row to a Sale entity."""
        return Sale(
            id=row["id"],
            invoice_number=row["invoice_number"],
            prescription_id=row["prescription_id"],
            customer_name=row["customer_name"],
            items=items,
            subtotal=_money(row["subtotal"]),
            discount_percent=_money(row["discount_percent"]),
            discount_amount=_money(row["discount_amount"]),
            gst_amount=_money(row["gst_amount"]),
            total_amount=_money(row["total_amount"]),
            payment_method=PaymentMethod(row["payment_method"]),
            created_by=row["created_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_sale_item(row: aiosqlite.Row) -> SaleItem:
        """Convert a database row to a SaleItem entity."""
        return SaleItem(
            id=row["id"],
            sale_id=row["sale_id"],
            medicine_id=row["medicine_id"],
            batch_id=row["batch_id"],
            quantity=row["quantity"],
            unit_price=_money(row["unit_price"]),
            gst_rate=_money(row["gst_rate"]),
            total=_money(row["total"]),
        )
