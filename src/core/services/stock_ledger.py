"""
Stock ledger service.

FIFO-by-expiry allocation over medicine batches plus the read-only
inventory reports (low stock and expiring batches).

NO infrastructure imports - depends only on core entities, interfaces, exceptions.
"""

from contextlib import nullcontext
from datetime import date, timedelta

from src.config import get_logger
from src.core.entities.inventory import (
    ExpiryAlert,
    LowStockAlert,
    StockAllocation,
    StockLevel,
)
from src.core.entities.medicine import Batch
from src.core.exceptions import InsufficientStockError, ValidationError
from src.core.interfaces import IBatchStore, IMedicineStore, TransactionFactory

logger = get_logger(__name__)

DEFAULT_EXPIRY_ALERT_DAYS = 90


def plan_fifo(batches: list[Batch], quantity: int) -> list[StockAllocation]:
    """
    Walk expiry-ordered batches taking min(remaining, needed) from each.

    Pure planning step: nothing is mutated. The caller is expected to
    have checked that the batches hold at least ``quantity`` in total.
    """
    allocations: list[StockAllocation] = []
    needed = quantity
    for batch in batches:
        if needed <= 0:
            break
        take = min(batch.quantity, needed)
        if take <= 0:
            continue
        allocations.append(
            StockAllocation(
                batch_id=batch.id,
                batch_number=batch.batch_number,
                quantity=take,
            )
        )
        needed -= take
    return allocations


class StockLedgerService:
    """
    Batch-level stock accounting.

    Required interfaces for DI:
    - IBatchStore: batch reads and conditional decrements
    - IMedicineStore: medicine lookups for reports
    - TransactionFactory: optional unit of work for multi-batch decrements
    """

    def __init__(
        self,
        batch_store: IBatchStore,
        medicine_store: IMedicineStore,
        transaction: TransactionFactory | None = None,
    ):
        self._batches = batch_store
        self._medicines = medicine_store
        self._transaction = transaction or nullcontext

    async def available_stock(
        self, medicine_id: str, today: date | None = None
    ) -> StockLevel:
        """Sellable stock of a medicine. Expired batches count for nothing."""
        batches = await self._batches.list_available(medicine_id, today or date.today())
        return StockLevel(
            medicine_id=medicine_id,
            total_quantity=sum(b.quantity for b in batches),
            batches=batches,
        )

    async def reduce_stock(
        self, medicine_id: str, quantity: int, today: date | None = None
    ) -> list[StockAllocation]:
        """
        Deplete ``quantity`` units of a medicine, soonest-to-expire first.

        All or nothing: when total sellable stock is short, fails before
        any batch is touched.

        Raises:
            ValidationError: If quantity is not positive
            InsufficientStockError: If sellable stock is below ``quantity``
        """
        if quantity <= 0:
            raise ValidationError("quantity", "Quantity must be positive", quantity)

        async with self._transaction():
            stock = await self.available_stock(medicine_id, today)
            if stock.total_quantity < quantity:
                raise InsufficientStockError(
                    requested=quantity,
                    available=stock.total_quantity,
                    medicine_id=medicine_id,
                )

            allocations = plan_fifo(stock.batches, quantity)
            for allocation in allocations:
                await self._batches.decrement_quantity(
                    allocation.batch_id, allocation.quantity
                )

        logger.info(
            "stock_reduced",
            medicine_id=medicine_id,
            quantity=quantity,
            batches=len(allocations),
        )
        return allocations

    async def decrement_batch(self, batch_id: str, quantity: int) -> None:
        """
        Take ``quantity`` units from one explicitly chosen batch.

        Raises:
            InsufficientStockError: If the batch holds less than ``quantity``
        """
        await self._batches.decrement_quantity(batch_id, quantity)

    async def low_stock_alerts(self, today: date | None = None) -> list[LowStockAlert]:
        """Active medicines whose sellable stock is at or below reorder level."""
        totals = await self._batches.available_totals(today or date.today())
        medicines = await self._medicines.list_all_active()

        alerts = []
        for medicine in medicines:
            current = totals.get(medicine.id, 0)
            if current <= medicine.reorder_level:
                alerts.append(
                    LowStockAlert(
                        medicine=medicine,
                        current_stock=current,
                        reorder_level=medicine.reorder_level,
                    )
                )
        return alerts

    async def expiry_alerts(
        self,
        days_threshold: int = DEFAULT_EXPIRY_ALERT_DAYS,
        today: date | None = None,
    ) -> list[ExpiryAlert]:
        """In-stock batches expiring within ``days_threshold`` days, soonest first."""
        if days_threshold < 0:
            raise ValidationError("days", "Days threshold cannot be negative", days_threshold)

        today = today or date.today()
        batches = await self._batches.list_expiring(
            today, today + timedelta(days=days_threshold)
        )

        alerts = []
        medicine_cache = {}
        for batch in batches:
            if batch.medicine_id not in medicine_cache:
                medicine_cache[batch.medicine_id] = await self._medicines.get_medicine(
                    batch.medicine_id
                )
            medicine = medicine_cache[batch.medicine_id]
            if medicine is None:
                continue
            alerts.append(
                ExpiryAlert(
                    batch=batch,
                    medicine=medicine,
                    days_until_expiry=batch.days_until_expiry(today),
                )
            )
        return alerts
