"""
Check Inventory Alerts Use Case.

Collects medicines at or below their reorder level and in-stock batches
nearing expiry, so the counter can reorder or return them.
"""

from dataclasses import dataclass, field
from datetime import date

from src.application.dto.responses import ExpiryAlertResponse, LowStockAlertResponse
from src.config import get_logger, get_settings
from src.core.entities.inventory import ExpiryAlert, LowStockAlert
from src.core.services.stock_ledger import StockLedgerService

logger = get_logger(__name__)


@dataclass
class InventoryAlertsResult:
    """Result of an inventory alert scan."""

    low_stock: list[LowStockAlert] = field(default_factory=list)
    expiring: list[ExpiryAlert] = field(default_factory=list)
    within_days: int | None = None


class CheckInventoryAlertsUseCase:
    """
    Use case for low-stock and expiry scans.

    The expiry window defaults to ``PHARMACY_EXPIRY_ALERT_DAYS``.
    """

    def __init__(self, stock_ledger: StockLedgerService | None = None):
        self._ledger = stock_ledger

    async def _get_ledger(self) -> StockLedgerService:
        if self._ledger is None:
            from src.application.services import get_stock_ledger

            self._ledger = await get_stock_ledger()
        return self._ledger

    async def low_stock(self, today: date | None = None) -> InventoryAlertsResult:
        """Medicines whose sellable stock is at or below reorder level."""
        ledger = await self._get_ledger()
        alerts = await ledger.low_stock_alerts(today)

        logger.info("low_stock_check_complete", alerts=len(alerts))
        return InventoryAlertsResult(low_stock=alerts)

    async def expiring(
        self, within_days: int | None = None, today: date | None = None
    ) -> InventoryAlertsResult:
        """
        Batches expiring within the window.

        Raises:
            ValidationError: If within_days is negative
        """
        if within_days is None:
            within_days = get_settings().pharmacy.expiry_alert_days

        ledger = await self._get_ledger()
        alerts = await ledger.expiry_alerts(days_threshold=within_days, today=today)

        logger.info("expiry_check_complete", within_days=within_days, alerts=len(alerts))
        return InventoryAlertsResult(expiring=alerts, within_days=within_days)

    def to_low_stock_response(
        self, result: InventoryAlertsResult
    ) -> list[LowStockAlertResponse]:
        return [LowStockAlertResponse.from_entity(a) for a in result.low_stock]

    def to_expiry_response(self, result: InventoryAlertsResult) -> list[ExpiryAlertResponse]:
        return [ExpiryAlertResponse.from_entity(a) for a in result.expiring]
