"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.base import CamelModel
from src.application.dto.requests import (
    CreateBatchRequest,
    CreateMedicineRequest,
    CreateSaleRequest,
    SaleItemRequest,
    UpdateBatchQuantityRequest,
    UpdateMedicineRequest,
    UploadPrescriptionRequest,
    ValidateDispensingRequest,
    VerifyDoctorRequest,
)
from src.application.dto.responses import (
    AuditLogListResponse,
    AuditLogResponse,
    BatchResponse,
    ComplianceResultResponse,
    DatabaseHealthResponse,
    DoctorVerificationResponse,
    ErrorResponse,
    ExpiryAlertResponse,
    HealthResponse,
    LowStockAlertResponse,
    MedicineListResponse,
    MedicineResponse,
    PaginatedResponse,
    ParsedPrescriptionResponse,
    PrescriptionListResponse,
    PrescriptionResponse,
    ProviderHealthResponse,
    SaleItemResponse,
    SaleListResponse,
    SaleResponse,
    SalesReportResponse,
    StockLevelResponse,
)

__all__ = [
    "CamelModel",
    # Requests
    "CreateSaleRequest",
    "SaleItemRequest",
    "ValidateDispensingRequest",
    "UploadPrescriptionRequest",
    "VerifyDoctorRequest",
    "CreateMedicineRequest",
    "UpdateMedicineRequest",
    "CreateBatchRequest",
    "UpdateBatchQuantityRequest",
    # Responses
    "SaleResponse",
    "SaleItemResponse",
    "SaleListResponse",
    "SalesReportResponse",
    "ComplianceResultResponse",
    "PrescriptionResponse",
    "PrescriptionListResponse",
    "ParsedPrescriptionResponse",
    "DoctorVerificationResponse",
    "MedicineResponse",
    "MedicineListResponse",
    "BatchResponse",
    "StockLevelResponse",
    "LowStockAlertResponse",
    "ExpiryAlertResponse",
    "AuditLogResponse",
    "AuditLogListResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "DatabaseHealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
]
