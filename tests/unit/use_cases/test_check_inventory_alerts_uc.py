"""Unit tests for CheckInventoryAlertsUseCase."""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.application.use_cases.check_inventory_alerts import CheckInventoryAlertsUseCase
from src.core.entities import ExpiryAlert, LowStockAlert
from tests.factories import make_batch, make_medicine

TODAY = date(2025, 3, 14)


@pytest.fixture
def mock_ledger():
    medicine = make_medicine(reorder_level=20)
    batch = make_batch(
        medicine.id,
        manufacture_date=TODAY - timedelta(days=300),
        expiry_date=TODAY + timedelta(days=45),
        quantity=12,
    )
    ledger = AsyncMock()
    ledger.low_stock_alerts = AsyncMock(
        return_value=[LowStockAlert(medicine=medicine, current_stock=12, reorder_level=20)]
    )
    ledger.expiry_alerts = AsyncMock(
        return_value=[ExpiryAlert(batch=batch, medicine=medicine, days_until_expiry=45)]
    )
    return ledger


async def test_low_stock(mock_ledger):
    use_case = CheckInventoryAlertsUseCase(stock_ledger=mock_ledger)

    result = await use_case.low_stock(today=TODAY)

    mock_ledger.low_stock_alerts.assert_awaited_once_with(TODAY)
    body = [r.model_dump(by_alias=True) for r in use_case.to_low_stock_response(result)]
    assert body[0]["currentStock"] == 12
    assert body[0]["reorderLevel"] == 20
    assert body[0]["medicine"]["name"] == "Paracetamol 500mg"


async def test_expiring_uses_explicit_window(mock_ledger):
    use_case = CheckInventoryAlertsUseCase(stock_ledger=mock_ledger)

    result = await use_case.expiring(within_days=60, today=TODAY)

    mock_ledger.expiry_alerts.assert_awaited_once_with(days_threshold=60, today=TODAY)
    assert result.within_days == 60
    body = use_case.to_expiry_response(result)[0].model_dump(by_alias=True)
    assert body["daysUntilExpiry"] == 45
    assert body["batch"]["batchNumber"] == "B001"


async def test_expiring_defaults_to_configured_window(mock_ledger):
    settings = MagicMock()
    settings.pharmacy.expiry_alert_days = 90
    use_case = CheckInventoryAlertsUseCase(stock_ledger=mock_ledger)

    with patch(
        "src.application.use_cases.check_inventory_alerts.get_settings",
        return_value=settings,
    ):
        result = await use_case.expiring(today=TODAY)

    assert result.within_days == 90
    mock_ledger.expiry_alerts.assert_awaited_once_with(days_threshold=90, today=TODAY)
