"""Inventory alert endpoints."""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_inventory_alerts_use_case
from src.application.dto.responses import (
    ErrorResponse,
    ExpiryAlertResponse,
    LowStockAlertResponse,
)
from src.application.use_cases import CheckInventoryAlertsUseCase

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/alerts/low-stock", response_model=list[LowStockAlertResponse])
async def low_stock_alerts(
    use_case: CheckInventoryAlertsUseCase = Depends(get_inventory_alerts_use_case),
) -> list[LowStockAlertResponse]:
    """Active medicines whose sellable stock is at or below reorder level."""
    result = await use_case.low_stock()
    return use_case.to_low_stock_response(result)


@router.get(
    "/alerts/expiry",
    response_model=list[ExpiryAlertResponse],
    responses={400: {"model": ErrorResponse}},
)
async def expiry_alerts(
    days: int | None = Query(default=None, description="Look-ahead window in days"),
    use_case: CheckInventoryAlertsUseCase = Depends(get_inventory_alerts_use_case),
) -> list[ExpiryAlertResponse]:
    """In-stock batches expiring within the window, soonest first."""
    result = await use_case.expiring(within_days=days)
    return use_case.to_expiry_response(result)
