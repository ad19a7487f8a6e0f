"""Application use cases."""

from src.application.use_cases.check_inventory_alerts import (
    CheckInventoryAlertsUseCase,
    InventoryAlertsResult,
)
from src.application.use_cases.create_sale import CreateSaleResult, CreateSaleUseCase
from src.application.use_cases.generate_sales_report import (
    GenerateSalesReportUseCase,
    SalesReportResult,
)
from src.application.use_cases.upload_prescription import (
    UploadPrescriptionResult,
    UploadPrescriptionUseCase,
)
from src.application.use_cases.validate_dispensing import (
    ValidateDispensingResult,
    ValidateDispensingUseCase,
)

__all__ = [
    "CheckInventoryAlertsUseCase",
    "InventoryAlertsResult",
    "CreateSaleUseCase",
    "CreateSaleResult",
    "GenerateSalesReportUseCase",
    "SalesReportResult",
    "UploadPrescriptionUseCase",
    "UploadPrescriptionResult",
    "ValidateDispensingUseCase",
    "ValidateDispensingResult",
]
