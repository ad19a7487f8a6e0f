"""Medicine master data and batch entities."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class ScheduleType(str, Enum):
    """Drug schedule under the Drugs and Cosmetics Rules, 1945."""

    OTC = "OTC"  # Over-the-counter
    H = "H"  # Prescription required
    H1 = "H1"  # Prescription with stricter controls
    X = "X"  # Narcotic and psychotropic substances


class Medicine(BaseModel):
    """A medicine that can be stocked and dispensed."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    generic_name: str
    manufacturer: str
    schedule_type: ScheduleType = ScheduleType.OTC
    hsn_code: str  # Tax classification (HSN) code
    unit_price: Decimal
    reorder_level: int = 10
    description: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Batch(BaseModel):
    """
    A manufactured lot of a medicine.

    Each batch carries its own expiry date, on-hand quantity and MRP.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    medicine_id: str  # FK → medicines.id
    batch_number: str
    manufacture_date: date
    expiry_date: date
    quantity: int = Field(default=0, ge=0)
    mrp: Decimal  # Selling price per unit
    cost_price: Decimal
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def check_dates(self) -> "Batch":
        """Expiry must fall after manufacture."""
        if self.expiry_date <= self.manufacture_date:
            raise ValueError("expiry_date must be after manufacture_date")
        return self

    def is_expired(self, today: date | None = None) -> bool:
        """A batch expiring today is already unsellable."""
        return self.expiry_date <= (today or date.today())

    def days_until_expiry(self, today: date | None = None) -> int:
        return (self.expiry_date - (today or date.today())).days
