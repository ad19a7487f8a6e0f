"""
Dependency injection container for FastAPI.

Provides service instances and request context to route handlers.
"""

from fastapi import Header, Request

from src.application.services import (
    get_audit_recorder,
    get_billing_engine,
    get_inventory_service,
    get_prescription_service,
    get_stock_ledger,
)
from src.application.use_cases import (
    CheckInventoryAlertsUseCase,
    CreateSaleUseCase,
    GenerateSalesReportUseCase,
    UploadPrescriptionUseCase,
    ValidateDispensingUseCase,
)
from src.core.services import (
    AuditRecorderService,
    BillingEngine,
    InventoryService,
    PrescriptionService,
    StockLedgerService,
)

ANONYMOUS_ACTOR = "anonymous"


# Request context
def get_actor_id(x_actor_id: str | None = Header(default=None)) -> str:
    """Acting user from the X-Actor-Id header."""
    if x_actor_id and x_actor_id.strip():
        return x_actor_id.strip()
    return ANONYMOUS_ACTOR


def get_client_ip(request: Request) -> str | None:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


# Service dependencies
async def get_billing() -> BillingEngine:
    """Get billing engine."""
    return await get_billing_engine()


async def get_ledger() -> StockLedgerService:
    """Get stock ledger service."""
    return await get_stock_ledger()


async def get_inventory() -> InventoryService:
    """Get inventory service."""
    return await get_inventory_service()


async def get_prescriptions() -> PrescriptionService:
    """Get prescription service."""
    return await get_prescription_service()


async def get_audit() -> AuditRecorderService:
    """Get audit recorder."""
    return await get_audit_recorder()


# Use case dependencies
def get_create_sale_use_case() -> CreateSaleUseCase:
    """Get create sale use case."""
    return CreateSaleUseCase()


def get_validate_dispensing_use_case() -> ValidateDispensingUseCase:
    """Get validate dispensing use case."""
    return ValidateDispensingUseCase()


def get_sales_report_use_case() -> GenerateSalesReportUseCase:
    """Get sales report use case."""
    return GenerateSalesReportUseCase()


def get_upload_prescription_use_case() -> UploadPrescriptionUseCase:
    """Get upload prescription use case."""
    return UploadPrescriptionUseCase()


def get_inventory_alerts_use_case() -> CheckInventoryAlertsUseCase:
    """Get inventory alerts use case."""
    return CheckInventoryAlertsUseCase()
