"""
Inventory master-data service.

Medicine and batch creation and updates. Stock depletion lives in the
stock ledger; this service only manages the records it depletes.
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.config import get_logger
from src.core.entities.audit import AuditAction
from src.core.entities.medicine import Batch, Medicine
from src.core.exceptions import (
    BatchNotFoundError,
    MedicineNotFoundError,
    ValidationError,
)
from src.core.interfaces import IBatchStore, IMedicineStore
from src.core.services.audit_recorder import AuditRecorderService

logger = get_logger(__name__)

HSN_CODE_PATTERN = re.compile(r"^\d{4,8}$")

UPDATABLE_MEDICINE_FIELDS = frozenset(
    {
        "name",
        "generic_name",
        "manufacturer",
        "schedule_type",
        "hsn_code",
        "unit_price",
        "reorder_level",
        "description",
        "is_active",
    }
)


class InventoryService:
    """
    Medicine and batch management.

    Required interfaces for DI:
    - IMedicineStore: medicine persistence
    - IBatchStore: batch persistence
    - AuditRecorderService: optional audit trail
    """

    def __init__(
        self,
        medicine_store: IMedicineStore,
        batch_store: IBatchStore,
        audit_recorder: AuditRecorderService | None = None,
    ):
        self._medicines = medicine_store
        self._batches = batch_store
        self._audit = audit_recorder

    async def create_medicine(
        self,
        medicine: Medicine,
        actor_id: str | None = None,
        source_ip: str | None = None,
    ) -> Medicine:
        """Validate and store a new medicine."""
        self._validate_medicine(medicine)
        created = await self._medicines.create_medicine(medicine)
        logger.info("medicine_created", medicine_id=created.id, name=created.name)
        self._record(
            AuditAction.MEDICINE_CREATE,
            "Medicine",
            created.id,
            actor_id,
            {"name": created.name, "schedule_type": created.schedule_type.value},
            source_ip,
        )
        return created

    async def get_medicine(self, medicine_id: str) -> Medicine:
        medicine = await self._medicines.get_medicine(medicine_id)
        if medicine is None:
            raise MedicineNotFoundError(medicine_id)
        return medicine

    async def list_medicines(
        self,
        limit: int = 20,
        offset: int = 0,
        search: str | None = None,
    ) -> list[Medicine]:
        return await self._medicines.list_medicines(
            limit=limit, offset=offset, search=search, active_only=True
        )

    async def update_medicine(
        self,
        medicine_id: str,
        changes: dict[str, Any],
        actor_id: str | None = None,
        source_ip: str | None = None,
    ) -> Medicine:
        """
        Apply a partial update to a medicine.

        Unknown fields are rejected rather than silently ignored.
        """
        unknown = set(changes) - UPDATABLE_MEDICINE_FIELDS
        if unknown:
            raise ValidationError(
                "fields", f"Cannot update fields: {', '.join(sorted(unknown))}", unknown
            )

        medicine = await self.get_medicine(medicine_id)
        updated = medicine.model_copy(update=changes)
        # Re-run field validation on the merged record
        updated = Medicine.model_validate(updated.model_dump())

        # A dispensed medicine keeps the schedule it was sold under
        if updated.schedule_type != medicine.schedule_type and (
            await self._medicines.has_dispensing_history(medicine_id)
        ):
            raise ValidationError(
                "schedule_type",
                "Schedule cannot change once the medicine has been dispensed",
                updated.schedule_type.value,
            )

        updated.updated_at = datetime.now()
        self._validate_medicine(updated)

        saved = await self._medicines.update_medicine(updated)
        logger.info("medicine_updated", medicine_id=medicine_id, fields=sorted(changes))
        self._record(
            AuditAction.MEDICINE_UPDATE,
            "Medicine",
            medicine_id,
            actor_id,
            {"fields": sorted(changes)},
            source_ip,
        )
        return saved

    async def create_batch(
        self,
        batch: Batch,
        actor_id: str | None = None,
        source_ip: str | None = None,
    ) -> Batch:
        """Receive a new batch of an existing medicine."""
        await self.get_medicine(batch.medicine_id)

        if batch.mrp <= Decimal("0"):
            raise ValidationError("mrp", "MRP must be positive", batch.mrp)
        if batch.cost_price < Decimal("0"):
            raise ValidationError("costPrice", "Cost price cannot be negative", batch.cost_price)
        if batch.manufacture_date > datetime.now().date():
            raise ValidationError(
                "manufactureDate",
                "Manufacture date cannot be in the future",
                batch.manufacture_date,
            )

        created = await self._batches.create_batch(batch)
        logger.info(
            "batch_created",
            batch_id=created.id,
            medicine_id=created.medicine_id,
            batch_number=created.batch_number,
            quantity=created.quantity,
        )
        self._record(
            AuditAction.BATCH_CREATE,
            "Batch",
            created.id,
            actor_id,
            {
                "medicine_id": created.medicine_id,
                "batch_number": created.batch_number,
                "quantity": created.quantity,
            },
            source_ip,
        )
        return created

    async def list_batches(self, medicine_id: str) -> list[Batch]:
        await self.get_medicine(medicine_id)
        return await self._batches.list_batches(medicine_id)

    async def update_batch_quantity(
        self,
        batch_id: str,
        quantity: int,
        actor_id: str | None = None,
        source_ip: str | None = None,
    ) -> Batch:
        """Overwrite a batch's on-hand quantity after a stock count."""
        if quantity < 0:
            raise ValidationError("quantity", "Quantity cannot be negative", quantity)

        updated = await self._batches.update_quantity(batch_id, quantity)
        if updated is None:
            raise BatchNotFoundError(batch_id)

        logger.info("batch_quantity_updated", batch_id=batch_id, quantity=quantity)
        self._record(
            AuditAction.BATCH_QUANTITY_UPDATE,
            "Batch",
            batch_id,
            actor_id,
            {"quantity": quantity},
            source_ip,
        )
        return updated

    @staticmethod
    def _validate_medicine(medicine: Medicine) -> None:
        if not HSN_CODE_PATTERN.match(medicine.hsn_code or ""):
            raise ValidationError("hsnCode", "HSN code must be 4 to 8 digits", medicine.hsn_code)
        if medicine.unit_price <= Decimal("0"):
            raise ValidationError("unitPrice", "Unit price must be positive", medicine.unit_price)
        if medicine.reorder_level < 0:
            raise ValidationError(
                "reorderLevel", "Reorder level cannot be negative", medicine.reorder_level
            )

    def _record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        actor_id: str | None,
        details: dict[str, Any],
        source_ip: str | None,
    ) -> None:
        if self._audit is not None:
            self._audit.record(
                action,
                entity_type=entity_type,
                entity_id=entity_id,
                actor_id=actor_id,
                details=details,
                source_ip=source_ip,
            )
