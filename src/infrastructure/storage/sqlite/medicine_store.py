"""SQLite implementation of medicine storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from src.config import get_logger
from src.core.entities.medicine import Medicine, ScheduleType
from src.core.interfaces.medicine_store import IMedicineStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteMedicineStore(IMedicineStore):
    """SQLite implementation of medicine master-data storage."""

    async def create_medicine(self, medicine: Medicine) -> Medicine:
        """Create a new medicine."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO medicines (
                    id, name, generic_name, manufacturer, schedule_type,
                    hsn_code, unit_price, reorder_level, description,
                    is_active, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    medicine.id,
                    medicine.name,
                    medicine.generic_name,
                    medicine.manufacturer,
                    medicine.schedule_type.value,
                    medicine.hsn_code,
                    float(medicine.unit_price),
                    medicine.reorder_level,
                    medicine.description,
                    int(medicine.is_active),
                    medicine.created_at.isoformat(),
                    medicine.updated_at.isoformat(),
                ),
            )
        return medicine

    async def get_medicine(self, medicine_id: str) -> Medicine | None:
        """Get medicine by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM medicines WHERE id = ?",
                (medicine_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_medicine(row) if row else None

    async def update_medicine(self, medicine: Medicine) -> Medicine:
        """Persist changes to an existing medicine."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE medicines SET
                    name = ?, generic_name = ?, manufacturer = ?,
                    schedule_type = ?, hsn_code = ?, unit_price = ?,
                    reorder_level = ?, description = ?, is_active = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    medicine.name,
                    medicine.generic_name,
                    medicine.manufacturer,
                    medicine.schedule_type.value,
                    medicine.hsn_code,
                    float(medicine.unit_price),
                    medicine.reorder_level,
                    medicine.description,
                    int(medicine.is_active),
                    medicine.updated_at.isoformat(),
                    medicine.id,
                ),
            )
        return medicine

    async def list_medicines(
        self,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
        active_only: bool = True,
    ) -> list[Medicine]:
        """List medicines, optionally filtered by a name search."""
        clauses = []
        params: list = []
        if active_only:
            clauses.append("is_active = 1")
        if search:
            clauses.append("(name LIKE ? OR generic_name LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM medicines
                {where}
                ORDER BY name ASC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_medicine(r) for r in rows]

    async def list_all_active(self) -> list[Medicine]:
        """Every active medicine, ordered by name."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM medicines WHERE is_active = 1 ORDER BY name ASC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_medicine(r) for r in rows]

    async def has_dispensing_history(self, medicine_id: str) -> bool:
        """Whether any sale line references the medicine."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM sale_items WHERE medicine_id = ? LIMIT 1",
                (medicine_id,),
            )
            return await cursor.fetchone() is not None

    @staticmethod
    def _row_to_medicine(row: aiosqlite.Row) -> Medicine:
        """Convert a database row to a Medicine entity."""
        return Medicine(
            id=row["id"],
            name=row["name"],
            generic_name=row["generic_name"],
            manufacturer=row["manufacturer"],
            schedule_type=ScheduleType(row["schedule_type"]),
            hsn_code=row["hsn_code"],
            unit_price=Decimal(str(row["unit_price"])),
            reorder_level=row["reorder_level"],
            description=row["description"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
