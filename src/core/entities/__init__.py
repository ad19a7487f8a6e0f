"""Core domain entities."""

from src.core.entities.audit import AuditAction, AuditLogEntry
from src.core.entities.compliance import (
    ComplianceResult,
    ComplianceRule,
    DoctorRegistrationResult,
)
from src.core.entities.inventory import (
    ExpiryAlert,
    LowStockAlert,
    StockAllocation,
    StockLevel,
)
from src.core.entities.medicine import Batch, Medicine, ScheduleType
from src.core.entities.prescription import (
    ParsedMedication,
    Prescription,
    PrescriptionFacts,
)
from src.core.entities.sale import (
    PaymentMethod,
    Sale,
    SaleItem,
    SaleLineInput,
    SalesReport,
    SaleState,
)

__all__ = [
    # Medicine entities
    "Medicine",
    "Batch",
    "ScheduleType",
    # Prescription entities
    "Prescription",
    "PrescriptionFacts",
    "ParsedMedication",
    # Sale entities
    "Sale",
    "SaleItem",
    "SaleState",
    "SalesReport",
    "PaymentMethod",
    "SaleLineInput",
    # Inventory entities
    "StockLevel",
    "StockAllocation",
    "LowStockAlert",
    "ExpiryAlert",
    # Compliance entities
    "ComplianceRule",
    "ComplianceResult",
    "DoctorRegistrationResult",
    # Audit entities
    "AuditLogEntry",
    "AuditAction",
]
