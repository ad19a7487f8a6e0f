"""SQLite implementation of batch storage."""

from datetime import date, datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.medicine import Batch
from src.core.exceptions import BatchNotFoundError, InsufficientStockError, ValidationError
from src.core.interfaces.medicine_store import IBatchStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteBatchStore(IBatchStore):
    """SQLite implementation of batch storage and stock mutation."""

    async def create_batch(self, batch: Batch) -> Batch:
        """Create a new batch."""
        async with get_transaction() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO batches (
                        id, medicine_id, batch_number, manufacture_date,
                        expiry_date, quantity, mrp, cost_price, is_active,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        batch.id,
                        batch.medicine_id,
                        batch.batch_number,
                        batch.manufacture_date.isoformat(),
                        batch.expiry_date.isoformat(),
                        batch.quantity,
                        float(batch.mrp),
                        float(batch.cost_price),
                        int(batch.is_active),
                        batch.created_at.isoformat(),
                        batch.updated_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError(
                    "batchNumber",
                    f"Batch {batch.batch_number} already exists for this medicine",
                    batch.batch_number,
                ) from e
        return batch

    async def get_batch(self, batch_id: str) -> Batch | None:
        """Get batch by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM batches WHERE id = ?", (batch_id,))
            row = await cursor.fetchone()
            return self._row_to_batch(row) if row else None

    async def list_batches(self, medicine_id: str) -> list[Batch]:
        """List every batch of a medicine, soonest expiry first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM batches
                WHERE medicine_id = ?
                ORDER BY expiry_date ASC, batch_number ASC
                """,
                (medicine_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(r) for r in rows]

    async def list_available(self, medicine_id: str, today: date) -> list[Batch]:
        """List active, unexpired batches of a medicine, soonest expiry first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM batches
                WHERE medicine_id = ?
                  AND is_active = 1
                  AND expiry_date > ?
                ORDER BY expiry_date ASC, created_at ASC
                """,
                (medicine_id, today.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(r) for r in rows]

    async def available_totals(self, today: date) -> dict[str, int]:
        """Sellable quantity per medicine ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT medicine_id, SUM(quantity) AS total
                FROM batches
                WHERE is_active = 1 AND expiry_date > ?
                GROUP BY medicine_id
                """,
                (today.isoformat(),),
            )
            rows = await cursor.fetchall()
            return {r["medicine_id"]: int(r["total"] or 0) for r in rows}

    async def list_expiring(self, today: date, until: date) -> list[Batch]:
        """Active in-stock batches expiring in (today, until]."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM batches
                WHERE is_active = 1
                  AND quantity > 0
                  AND expiry_date > ?
                  AND expiry_date <= ?
                ORDER BY expiry_date ASC
                """,
                (today.isoformat(), until.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(r) for r in rows]

    async def decrement_quantity(self, batch_id: str, quantity: int) -> None:
        """
        Conditionally decrement a batch.

        The check and the write are a single statement, so two concurrent
        sales cannot both take the last units of a batch.
        """
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE batches
                SET quantity = quantity - ?, updated_at = ?
                WHERE id = ? AND quantity >= ?
                """,
                (quantity, datetime.now().isoformat(), batch_id, quantity),
            )
            if cursor.rowcount == 1:
                return

            cursor = await conn.execute(
                "SELECT batch_number, quantity FROM batches WHERE id = ?", (batch_id,)
            )
            row = await cursor.fetchone()

        if row is None:
            raise BatchNotFoundError(batch_id)

        logger.warning(
            "batch_decrement_rejected",
            batch_id=batch_id,
            requested=quantity,
            available=row["quantity"],
        )
        raise InsufficientStockError(
            requested=quantity,
            available=row["quantity"],
            batch_number=row["batch_number"],
        )

    async def update_quantity(self, batch_id: str, quantity: int) -> Batch | None:
        """Set a batch's on-hand quantity."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE batches SET quantity = ?, updated_at = ? WHERE id = ?",
                (quantity, datetime.now().isoformat(), batch_id),
            )
            if cursor.rowcount == 0:
                return None
            cursor = await conn.execute("SELECT * FROM batches WHERE id = ?", (batch_id,))
            row = await cursor.fetchone()
            return self._row_to_batch(row)

    @staticmethod
    def _row_to_batch(row: aiosqlite.Row) -> Batch:
        """Convert a database row to a Batch entity."""
        return Batch(
            id=row["id"],
            medicine_id=row["medicine_id"],
            batch_number=row["batch_number"],
            manufacture_date=date.fromisoformat(row["manufacture_date"]),
            expiry_date=date.fromisoformat(row["expiry_date"]),
            quantity=row["quantity"],
            mrp=Decimal(str(row["mrp"])),
            cost_price=Decimal(str(row["cost_price"])),
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
