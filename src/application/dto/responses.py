"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import Field

from src.application.dto.base import CamelModel
from src.core.entities.audit import AuditLogEntry
from src.core.entities.compliance import ComplianceResult, DoctorRegistrationResult
from src.core.entities.inventory import ExpiryAlert, LowStockAlert, StockLevel
from src.core.entities.medicine import Batch, Medicine
from src.core.entities.prescription import Prescription, PrescriptionFacts
from src.core.entities.sale import Sale, SaleItem, SalesReport

# --- Medicines & batches ---


class MedicineResponse(CamelModel):
    """Medicine in response."""

    id: str
    name: str
    generic_name: str
    manufacturer: str
    schedule_type: str
    hsn_code: str
    unit_price: float
    reorder_level: int
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, medicine: Medicine) -> "MedicineResponse":
        return cls(
            id=medicine.id,
            name=medicine.name,
            generic_name=medicine.generic_name,
            manufacturer=medicine.manufacturer,
            schedule_type=medicine.schedule_type.value,
            hsn_code=medicine.hsn_code,
            unit_price=float(medicine.unit_price),
            reorder_level=medicine.reorder_level,
            description=medicine.description,
            is_active=medicine.is_active,
            created_at=medicine.created_at,
            updated_at=medicine.updated_at,
        )


class BatchResponse(CamelModel):
    """Batch in response."""

    id: str
    medicine_id: str
    batch_number: str
    manufacture_date: date
    expiry_date: date
    quantity: int
    mrp: float
    cost_price: float
    is_active: bool

    @classmethod
    def from_entity(cls, batch: Batch) -> "BatchResponse":
        return cls(
            id=batch.id,
            medicine_id=batch.medicine_id,
            batch_number=batch.batch_number,
            manufacture_date=batch.manufacture_date,
            expiry_date=batch.expiry_date,
            quantity=batch.quantity,
            mrp=float(batch.mrp),
            cost_price=float(batch.cost_price),
            is_active=batch.is_active,
        )


class StockLevelResponse(CamelModel):
    """Sellable stock of a medicine."""

    medicine_id: str
    total_quantity: int
    batches: list[BatchResponse]

    @classmethod
    def from_entity(cls, stock: StockLevel) -> "StockLevelResponse":
        return cls(
            medicine_id=stock.medicine_id,
            total_quantity=stock.total_quantity,
            batches=[BatchResponse.from_entity(b) for b in stock.batches],
        )


class LowStockAlertResponse(CamelModel):
    """Low stock alert entry."""

    medicine: MedicineResponse
    current_stock: int
    reorder_level: int

    @classmethod
    def from_entity(cls, alert: LowStockAlert) -> "LowStockAlertResponse":
        return cls(
            medicine=MedicineResponse.from_entity(alert.medicine),
            current_stock=alert.current_stock,
            reorder_level=alert.reorder_level,
        )


class ExpiryAlertResponse(CamelModel):
    """Expiring batch entry."""

    batch: BatchResponse
    medicine: MedicineResponse
    days_until_expiry: int

    @classmethod
    def from_entity(cls, alert: ExpiryAlert) -> "ExpiryAlertResponse":
        return cls(
            batch=BatchResponse.from_entity(alert.batch),
            medicine=MedicineResponse.from_entity(alert.medicine),
            days_until_expiry=alert.days_until_expiry,
        )


# --- Prescriptions ---


class PrescriptionResponse(CamelModel):
    """Stored prescription in response."""

    id: str
    doctor_name: str
    doctor_registration: str
    doctor_verified: bool
    patient_name: str
    patient_id: str | None = None
    prescription_date: datetime
    stored_file_path: str | None = None
    notes: str | None = None
    created_at: datetime
    fhir_bundle: dict[str, Any] | None = None

    @classmethod
    def from_entity(
        cls, prescription: Prescription, include_bundle: bool = False
    ) -> "PrescriptionResponse":
        return cls(
            id=prescription.id,
            doctor_name=prescription.doctor_name,
            doctor_registration=prescription.doctor_registration,
            doctor_verified=prescription.doctor_verified,
            patient_name=prescription.patient_name,
            patient_id=prescription.patient_id,
            prescription_date=prescription.prescription_date,
            stored_file_path=prescription.stored_file_path,
            notes=prescription.notes,
            created_at=prescription.created_at,
            fhir_bundle=prescription.fhir_bundle if include_bundle else None,
        )


class ParsedMedicationResponse(CamelModel):
    """Medication line extracted from a bundle."""

    name: str
    code: str | None = None
    dosage: str | None = None
    quantity: int | None = None
    duration: int | None = None
    instructions: str | None = None


class ParsedPrescriptionResponse(CamelModel):
    """Facts extracted from a stored bundle."""

    patient_name: str
    patient_id: str | None = None
    doctor_name: str
    doctor_registration: str
    prescription_date: datetime
    medications: list[ParsedMedicationResponse]

    @classmethod
    def from_entity(cls, facts: PrescriptionFacts) -> "ParsedPrescriptionResponse":
        return cls(
            patient_name=facts.patient_name,
            patient_id=facts.patient_id,
            doctor_name=facts.doctor_name,
            doctor_registration=facts.doctor_registration,
            prescription_date=facts.prescription_date,
            medications=[
                ParsedMedicationResponse(**m.model_dump()) for m in facts.medications
            ],
        )


class DoctorVerificationResponse(CamelModel):
    """Result of a registration number format check."""

    verified: bool
    council_type: str | None = None
    error: str | None = None

    @classmethod
    def from_entity(cls, result: DoctorRegistrationResult) -> "DoctorVerificationResponse":
        return cls(
            verified=result.valid,
            council_type=result.council_type,
            error=result.error,
        )


# --- Sales ---


class SaleItemResponse(CamelModel):
    """Sale line in response."""

    id: str
    medicine_id: str
    batch_id: str
    quantity: int
    unit_price: float
    gst_rate: float
    total: float
    medicine_name: str | None = None
    batch_number: str | None = None

    @classmethod
    def from_entity(cls, item: SaleItem) -> "SaleItemResponse":
        return cls(
            id=item.id,
            medicine_id=item.medicine_id,
            batch_id=item.batch_id,
            quantity=item.quantity,
            unit_price=float(item.unit_price),
            gst_rate=float(item.gst_rate),
            total=float(item.total),
            medicine_name=item.medicine.name if item.medicine else None,
            batch_number=item.batch.batch_number if item.batch else None,
        )


class SaleResponse(CamelModel):
    """Sale in response."""

    id: str
    invoice_number: str
    prescription_id: str | None = None
    customer_name: str | None = None
    items: list[SaleItemResponse]
    subtotal: float
    discount: float
    discount_amount: float
    gst_amount: float
    total_amount: float
    payment_method: str
    created_by: str
    created_at: datetime
    prescription: PrescriptionResponse | None = None

    @classmethod
    def from_entity(cls, sale: Sale) -> "SaleResponse":
        return cls(
            id=sale.id,
            invoice_number=sale.invoice_number,
            prescription_id=sale.prescription_id,
            customer_name=sale.customer_name,
            items=[SaleItemResponse.from_entity(i) for i in sale.items],
            subtotal=float(sale.subtotal),
            discount=float(sale.discount_percent),
            discount_amount=float(sale.discount_amount),
            gst_amount=float(sale.gst_amount),
            total_amount=float(sale.total_amount),
            payment_method=sale.payment_method.value,
            created_by=sale.created_by,
            created_at=sale.created_at,
            prescription=(
                PrescriptionResponse.from_entity(sale.prescription)
                if sale.prescription
                else None
            ),
        )


class SalesReportResponse(CamelModel):
    """Aggregated sales figures."""

    start_date: date | None = None
    end_date: date | None = None
    total_sales: int
    total_revenue: float
    total_gst: float
    items_sold: int

    @classmethod
    def from_entity(
        cls, report: SalesReport, start: date | None, end: date | None
    ) -> "SalesReportResponse":
        return cls(
            start_date=start,
            end_date=end,
            total_sales=report.total_sales,
            total_revenue=float(report.total_revenue),
            total_gst=float(report.total_gst),
            items_sold=report.items_sold,
        )


class ComplianceResultResponse(CamelModel):
    """Outcome of a dispensing compliance check."""

    allowed: bool
    warnings: list[str]
    errors: list[str]

    @classmethod
    def from_entity(cls, result: ComplianceResult) -> "ComplianceResultResponse":
        return cls(allowed=result.allowed, warnings=result.warnings, errors=result.errors)


# --- Audit ---


class AuditLogResponse(CamelModel):
    """Audit log entry in response."""

    id: int | None = None
    user_id: str | None = None
    action: str
    entity_type: str
    entity_id: str | None = None
    details: dict[str, Any]
    ip_address: str | None = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, entry: AuditLogEntry) -> "AuditLogResponse":
        return cls(**entry.model_dump())


# --- Pagination ---


class PaginatedResponse(CamelModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


class SaleListResponse(PaginatedResponse):
    sales: list[SaleResponse]


class MedicineListResponse(PaginatedResponse):
    medicines: list[MedicineResponse]


class PrescriptionListResponse(PaginatedResponse):
    prescriptions: list[PrescriptionResponse]


class AuditLogListResponse(PaginatedResponse):
    logs: list[AuditLogResponse]


# --- Health & errors ---


class ProviderHealthResponse(CamelModel):
    """Health status of a dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class DatabaseHealthResponse(CamelModel):
    """Schema and integrity status of the database."""

    status: str
    current_version: str | None = None
    pending_migrations: list[str] = Field(default_factory=list)
    checks: list[dict[str, Any]] = Field(default_factory=list)


class ErrorResponse(CamelModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. SALE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] = Field(default_factory=dict, description="Structured context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
