"""SQLite implementation of prescription storage."""

import json
from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.prescription import Prescription
from src.core.interfaces.prescription_store import IPrescriptionStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLitePrescriptionStore(IPrescriptionStore):
    """SQLite implementation of e-prescription storage."""

    async def create_prescription(self, prescription: Prescription) -> Prescription:
        """Create a new prescription."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO prescriptions (
                    id, fhir_bundle, doctor_name, doctor_registration,
                    doctor_verified, patient_name, patient_id,
                    prescription_date, stored_file_path, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    prescription.id,
                    json.dumps(prescription.fhir_bundle),
                    prescription.doctor_name,
                    prescription.doctor_registration,
                    int(prescription.doctor_verified),
                    prescription.patient_name,
                    prescription.patient_id,
                    prescription.prescription_date.isoformat(),
                    prescription.stored_file_path,
                    prescription.notes,
                    prescription.created_at.isoformat(),
                ),
            )
        return prescription

    async def get_prescription(self, prescription_id: str) -> Prescription | None:
        """Get prescription by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM prescriptions WHERE id = ?",
                (prescription_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_prescription(row) if row else None

    async def list_prescriptions(
        self,
        limit: int = 100,
        offset: int = 0,
        patient_name: str | None = None,
        doctor_name: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Prescription]:
        """List prescriptions, newest first, with optional filters."""
        clauses = []
        params: list = []
        if patient_name:
            clauses.append("patient_name LIKE ?")
            params.append(f"%{patient_name}%")
        if doctor_name:
            clauses.append("doctor_name LIKE ?")
            params.append(f"%{doctor_name}%")
        if start:
            clauses.append("prescription_date >= ?")
            params.append(start.isoformat())
        if end:
            clauses.append("prescription_date <= ?")
            params.append(end.isoformat())

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM prescriptions
                {where}
                ORDER BY created_at DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_prescription(r) for r in rows]

    async def set_stored_file_path(self, prescription_id: str, path: str) -> None:
        """Record where the raw bundle was written on disk."""
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE prescriptions SET stored_file_path = ? WHERE id = ?",
                (path, prescription_id),
            )

    @staticmethod
    def _row_to_prescription(row: aiosqlite.Row) -> Prescription:
        """Convert a database row to a Prescription entity."""
        return Prescription(
            id=row["id"],
            fhir_bundle=json.loads(row["fhir_bundle"]),
            doctor_name=row["doctor_name"],
            doctor_registration=row["doctor_registration"],
            doctor_verified=bool(row["doctor_verified"]),
            patient_name=row["patient_name"],
            patient_id=row["patient_id"],
            prescription_date=datetime.fromisoformat(row["prescription_date"]),
            stored_file_path=row["stored_file_path"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
