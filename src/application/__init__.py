"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from src.application.dto.requests import (
    CreateBatchRequest,
    CreateMedicineRequest,
    CreateSaleRequest,
    UploadPrescriptionRequest,
    ValidateDispensingRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    PaginatedResponse,
    PrescriptionResponse,
    SaleResponse,
)
from src.application.services import (
    get_audit_recorder,
    get_billing_engine,
    get_inventory_service,
    get_prescription_service,
    get_stock_ledger,
    reset_services,
)
from src.application.use_cases import (
    CheckInventoryAlertsUseCase,
    CreateSaleUseCase,
    GenerateSalesReportUseCase,
    UploadPrescriptionUseCase,
    ValidateDispensingUseCase,
)

__all__ = [
    # Request DTOs
    "CreateSaleRequest",
    "ValidateDispensingRequest",
    "UploadPrescriptionRequest",
    "CreateMedicineRequest",
    "CreateBatchRequest",
    # Response DTOs
    "SaleResponse",
    "PrescriptionResponse",
    "HealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
    # Use Cases
    "CreateSaleUseCase",
    "ValidateDispensingUseCase",
    "GenerateSalesReportUseCase",
    "UploadPrescriptionUseCase",
    "CheckInventoryAlertsUseCase",
    # Service factories
    "get_audit_recorder",
    "get_billing_engine",
    "get_stock_ledger",
    "get_inventory_service",
    "get_prescription_service",
    "reset_services",
]
