"""Sale (dispensing invoice) domain entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from src.core.entities.medicine import Batch, Medicine
from src.core.entities.prescription import Prescription


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "CASH"
    CARD = "CARD"
    UPI = "UPI"
    INSURANCE = "INSURANCE"


class SaleState(str, Enum):
    """Lifecycle of a sale while it is being created."""

    VALIDATING = "validating"
    PRICING = "pricing"
    ALLOCATING = "allocating"
    COMMITTED = "committed"
    ABORTED = "aborted"


class SaleItem(BaseModel):
    """
    A dispensed line on a sale.

    unit_price and gst_rate are snapshots taken at the time of sale.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    sale_id: str | None = None
    medicine_id: str  # FK → medicines.id
    batch_id: str  # FK → batches.id
    quantity: int = Field(gt=0)
    unit_price: Decimal
    gst_rate: Decimal
    total: Decimal = Decimal("0")  # subtotal + tax

    # Resolved references, attached when a sale is loaded
    medicine: Medicine | None = None
    batch: Batch | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def tax_amount(self) -> Decimal:
        return self.subtotal * self.gst_rate / Decimal("100")


class Sale(BaseModel):
    """A completed sale with its line items and computed totals."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    invoice_number: str = ""
    prescription_id: str | None = None
    customer_name: str | None = None
    items: list[SaleItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0")  # before discount
    discount_percent: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    gst_amount: Decimal = Decimal("0")  # after discount
    total_amount: Decimal = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.CASH
    created_by: str
    created_at: datetime = Field(default_factory=datetime.now)

    prescription: Prescription | None = None


class SalesReport(BaseModel):
    """Aggregated sales figures for a date range."""

    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    total_gst: Decimal = Decimal("0")
    items_sold: int = 0


class SaleLineInput(BaseModel):
    """A requested line: which batch of which medicine, and how many units."""

    medicine_id: str
    batch_id: str
    quantity: int = Field(gt=0)
