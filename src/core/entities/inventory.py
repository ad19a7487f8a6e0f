"""Inventory read models: stock levels, allocations and alerts."""

from pydantic import BaseModel, Field

from src.core.entities.medicine import Batch, Medicine


class StockLevel(BaseModel):
    """Sellable stock of a medicine, soonest-to-expire batch first."""

    medicine_id: str
    total_quantity: int = 0
    batches: list[Batch] = Field(default_factory=list)


class StockAllocation(BaseModel):
    """Quantity taken from one batch during a FIFO depletion."""

    batch_id: str
    batch_number: str
    quantity: int


class LowStockAlert(BaseModel):
    """Medicine whose sellable stock is at or below its reorder level."""

    medicine: Medicine
    current_stock: int
    reorder_level: int


class ExpiryAlert(BaseModel):
    """Batch with remaining stock that expires inside the alert window."""

    batch: Batch
    medicine: Medicine
    days_until_expiry: int
