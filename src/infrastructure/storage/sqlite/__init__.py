"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.audit_store import SQLiteAuditStore
from src.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.medicine_store import SQLiteMedicineStore
from src.infrastructure.storage.sqlite.prescription_store import SQLitePrescriptionStore
from src.infrastructure.storage.sqlite.sales_store import SQLiteSalesStore

# Singleton instances
_medicine_store: SQLiteMedicineStore | None = None
_batch_store: SQLiteBatchStore | None = None
_prescription_store: SQLitePrescriptionStore | None = None
_sales_store: SQLiteSalesStore | None = None
_audit_store: SQLiteAuditStore | None = None


async def get_medicine_store() -> SQLiteMedicineStore:
    """Get singleton medicine store instance."""
    global _medicine_store
    if _medicine_store is None:
        _medicine_store = SQLiteMedicineStore()
    return _medicine_store


async def get_batch_store() -> SQLiteBatchStore:
    """Get singleton batch store instance."""
    global _batch_store
    if _batch_store is None:
        _batch_store = SQLiteBatchStore()
    return _batch_store


async def get_prescription_store() -> SQLitePrescriptionStore:
    """Get singleton prescription store instance."""
    global _prescription_store
    if _prescription_store is None:
        _prescription_store = SQLitePrescriptionStore()
    return _prescription_store


async def get_sales_store() -> SQLiteSalesStore:
    """Get singleton sales store instance."""
    global _sales_store
    if _sales_store is None:
        _sales_store = SQLiteSalesStore()
    return _sales_store


async def get_audit_store() -> SQLiteAuditStore:
    """Get singleton audit store instance."""
    global _audit_store
    if _audit_store is None:
        _audit_store = SQLiteAuditStore()
    return _audit_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteMedicineStore",
    "SQLiteBatchStore",
    "SQLitePrescriptionStore",
    "SQLiteSalesStore",
    "SQLiteAuditStore",
    # Factory functions
    "get_medicine_store",
    "get_batch_store",
    "get_prescription_store",
    "get_sales_store",
    "get_audit_store",
]
