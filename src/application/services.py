"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from src.config import get_settings
from src.core.services import (
    AuditRecorderService,
    BillingEngine,
    InventoryService,
    PrescriptionService,
    StockLedgerService,
)

# Singleton service instances
_audit_recorder: AuditRecorderService | None = None
_billing_engine: BillingEngine | None = None
_stock_ledger: StockLedgerService | None = None
_inventory_service: InventoryService | None = None
_prescription_service: PrescriptionService | None = None


async def get_audit_recorder() -> AuditRecorderService:
    """
    Get or create the AuditRecorderService instance.

    The background writer is started by the API lifespan, not here.
    """
    global _audit_recorder

    if _audit_recorder is None:
        # Lazy import infrastructure to avoid circular imports
        from src.infrastructure.storage.sqlite import get_audit_store

        settings = get_settings()
        _audit_recorder = AuditRecorderService(
            audit_store=await get_audit_store(),
            queue_size=settings.audit.queue_size,
            enabled=settings.audit.enabled,
        )

    return _audit_recorder


async def get_billing_engine() -> BillingEngine:
    """
    Get or create the BillingEngine instance.

    Wires every SQLite store and the shared transaction factory so the
    sale commit spans all of them.
    """
    global _billing_engine

    if _billing_engine is None:
        from src.infrastructure.storage.sqlite import (
            get_batch_store,
            get_medicine_store,
            get_prescription_store,
            get_sales_store,
            get_transaction,
        )

        settings = get_settings()
        _billing_engine = BillingEngine(
            medicine_store=await get_medicine_store(),
            batch_store=await get_batch_store(),
            prescription_store=await get_prescription_store(),
            sales_store=await get_sales_store(),
            transaction=get_transaction,
            audit_recorder=await get_audit_recorder(),
            invoice_prefix=settings.pharmacy.invoice_prefix,
            enforce_compliance=settings.pharmacy.enforce_compliance,
        )

    return _billing_engine


async def get_stock_ledger() -> StockLedgerService:
    """Get or create the StockLedgerService instance."""
    global _stock_ledger

    if _stock_ledger is None:
        from src.infrastructure.storage.sqlite import (
            get_batch_store,
            get_medicine_store,
            get_transaction,
        )

        _stock_ledger = StockLedgerService(
            batch_store=await get_batch_store(),
            medicine_store=await get_medicine_store(),
            transaction=get_transaction,
        )

    return _stock_ledger


async def get_inventory_service() -> InventoryService:
    """Get or create the InventoryService instance."""
    global _inventory_service

    if _inventory_service is None:
        from src.infrastructure.storage.sqlite import get_batch_store, get_medicine_store

        _inventory_service = InventoryService(
            medicine_store=await get_medicine_store(),
            batch_store=await get_batch_store(),
            audit_recorder=await get_audit_recorder(),
        )

    return _inventory_service


async def get_prescription_service() -> PrescriptionService:
    """Get or create the PrescriptionService instance."""
    global _prescription_service

    if _prescription_service is None:
        from src.infrastructure.storage.sqlite import get_prescription_store

        settings = get_settings()
        _prescription_service = PrescriptionService(
            prescription_store=await get_prescription_store(),
            storage_dir=settings.pharmacy.prescription_storage_dir,
            audit_recorder=await get_audit_recorder(),
        )

    return _prescription_service


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _audit_recorder
    global _billing_engine
    global _stock_ledger
    global _inventory_service
    global _prescription_service

    _audit_recorder = None
    _billing_engine = None
    _stock_ledger = None
    _inventory_service = None
    _prescription_service = None


__all__ = [
    # Factory functions
    "get_audit_recorder",
    "get_billing_engine",
    "get_stock_ledger",
    "get_inventory_service",
    "get_prescription_service",
    "reset_services",
]
