"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.audit_store import IAuditStore
from src.core.interfaces.medicine_store import IBatchStore, IMedicineStore
from src.core.interfaces.prescription_store import IPrescriptionStore
from src.core.interfaces.sales_store import ISalesStore
from src.core.interfaces.transaction import TransactionFactory

__all__ = [
    # Storage interfaces
    "IMedicineStore",
    "IBatchStore",
    "IPrescriptionStore",
    "ISalesStore",
    "IAuditStore",
    # Unit of work
    "TransactionFactory",
]
