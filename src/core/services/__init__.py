"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.audit_recorder import AuditRecorderService, sanitize_details
from src.core.services.billing_engine import (
    BillingEngine,
    format_invoice_number,
    price_sale,
)
from src.core.services.fhir_parser import FHIRBundleParser
from src.core.services.inventory_service import InventoryService
from src.core.services.prescription_service import PrescriptionService
from src.core.services.stock_ledger import StockLedgerService, plan_fifo

__all__ = [
    # Billing
    "BillingEngine",
    "format_invoice_number",
    "price_sale",
    # Stock
    "StockLedgerService",
    "plan_fifo",
    # Inventory
    "InventoryService",
    # Prescriptions
    "PrescriptionService",
    "FHIRBundleParser",
    # Audit
    "AuditRecorderService",
    "sanitize_details",
]
