"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import Field, model_validator

from src.application.dto.base import CamelModel
from src.core.entities.medicine import ScheduleType
from src.core.entities.sale import PaymentMethod

HSN_CODE_REGEX = r"^\d{4,8}$"


# --- Sales ---


class SaleItemRequest(CamelModel):
    """One requested sale line: an explicit batch of a medicine."""

    medicine_id: str = Field(..., description="Medicine ID")
    batch_id: str = Field(..., description="Batch to dispense from")
    quantity: int = Field(..., gt=0, description="Units to dispense")


class CreateSaleRequest(CamelModel):
    """Request to create a sale."""

    items: list[SaleItemRequest] = Field(default_factory=list)
    discount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Discount percentage applied to the whole sale",
    )
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    prescription_id: str | None = Field(default=None)
    customer_name: str | None = Field(default=None, min_length=2, max_length=200)


class ValidateDispensingRequest(CamelModel):
    """Dry-run compliance check for a single medicine."""

    medicine_id: str
    quantity: int = Field(..., gt=0)
    prescription_id: str | None = None


# --- Prescriptions ---


class UploadPrescriptionRequest(CamelModel):
    """Upload of a FHIR R4 prescription bundle."""

    fhir_bundle: dict[str, Any] = Field(..., description="FHIR Bundle resource")
    notes: str | None = Field(default=None, max_length=1000)


class VerifyDoctorRequest(CamelModel):
    """Doctor registration number to check."""

    registration_number: str = Field(..., description="Council registration number")


# --- Medicines & batches ---


class CreateMedicineRequest(CamelModel):
    """Request to add a medicine."""

    name: str = Field(..., min_length=2, max_length=200)
    generic_name: str = Field(..., min_length=2, max_length=200)
    manufacturer: str = Field(..., min_length=2, max_length=200)
    schedule_type: ScheduleType
    hsn_code: str = Field(..., pattern=HSN_CODE_REGEX, examples=["30049099"])
    unit_price: Decimal = Field(..., gt=0)
    reorder_level: int = Field(default=10, ge=0)
    description: str | None = Field(default=None, max_length=500)


class UpdateMedicineRequest(CamelModel):
    """Partial medicine update; only provided fields change."""

    name: str | None = Field(default=None, min_length=2, max_length=200)
    generic_name: str | None = Field(default=None, min_length=2, max_length=200)
    manufacturer: str | None = Field(default=None, min_length=2, max_length=200)
    schedule_type: ScheduleType | None = None
    hsn_code: str | None = Field(default=None, pattern=HSN_CODE_REGEX)
    unit_price: Decimal | None = Field(default=None, gt=0)
    reorder_level: int | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, max_length=500)
    is_active: bool | None = None


class CreateBatchRequest(CamelModel):
    """Request to receive a batch of a medicine."""

    medicine_id: str
    batch_number: str = Field(..., min_length=1, max_length=50)
    manufacture_date: date
    expiry_date: date
    quantity: int = Field(..., gt=0)
    mrp: Decimal = Field(..., gt=0)
    cost_price: Decimal = Field(..., gt=0)

    @model_validator(mode="after")
    def check_dates(self) -> "CreateBatchRequest":
        if self.expiry_date <= self.manufacture_date:
            raise ValueError("expiryDate must be after manufactureDate")
        return self


class UpdateBatchQuantityRequest(CamelModel):
    """Stock count correction for a batch."""

    quantity: int = Field(..., ge=0)
