"""API test fixtures: the real app wired to services over a temporary database."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

import src.infrastructure.storage.sqlite.connection as conn_module
from src.api import dependencies as deps
from src.api.main import app
from src.application.use_cases import (
    CheckInventoryAlertsUseCase,
    CreateSaleUseCase,
    GenerateSalesReportUseCase,
    UploadPrescriptionUseCase,
    ValidateDispensingUseCase,
)
from src.core.services import (
    AuditRecorderService,
    BillingEngine,
    InventoryService,
    PrescriptionService,
    StockLedgerService,
)
from src.infrastructure.storage.sqlite import (
    SQLiteAuditStore,
    SQLiteBatchStore,
    SQLiteMedicineStore,
    SQLitePrescriptionStore,
    SQLiteSalesStore,
    get_transaction,
)
from src.infrastructure.storage.sqlite.migrations import migrator
from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@dataclass
class Services:
    billing: BillingEngine
    ledger: StockLedgerService
    inventory: InventoryService
    prescriptions: PrescriptionService
    audit: AuditRecorderService


@pytest.fixture
def mock_settings(tmp_path: Path) -> MagicMock:
    settings = MagicMock()
    settings.storage.db_path = tmp_path / "rxdesk.db"
    settings.storage.pool_size = 3
    settings.storage.busy_timeout = 5000
    return settings


@pytest.fixture
async def services(
    tmp_path: Path, mock_settings: MagicMock
) -> AsyncGenerator[Services, None]:
    """Real services over a migrated temporary database."""
    await initialize_database(mock_settings.storage.db_path)

    conn_module._pool = None
    with (
        patch.object(conn_module, "get_settings", return_value=mock_settings),
        patch.object(migrator, "get_settings", return_value=mock_settings),
    ):
        medicines = SQLiteMedicineStore()
        batches = SQLiteBatchStore()
        prescriptions = SQLitePrescriptionStore()
        audit = AuditRecorderService(SQLiteAuditStore())
        try:
            yield Services(
                billing=BillingEngine(
                    medicine_store=medicines,
                    batch_store=batches,
                    prescription_store=prescriptions,
                    sales_store=SQLiteSalesStore(),
                    transaction=get_transaction,
                    audit_recorder=audit,
                ),
                ledger=StockLedgerService(batches, medicines, transaction=get_transaction),
                inventory=InventoryService(medicines, batches, audit_recorder=audit),
                prescriptions=PrescriptionService(
                    prescriptions, storage_dir=tmp_path / "prescriptions", audit_recorder=audit
                ),
                audit=audit,
            )
        finally:
            await conn_module.close_pool()


@pytest.fixture
async def client(services: Services) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with every service dependency pointed at the test services."""
    overrides = {
        deps.get_billing: lambda: services.billing,
        deps.get_ledger: lambda: services.ledger,
        deps.get_inventory: lambda: services.inventory,
        deps.get_prescriptions: lambda: services.prescriptions,
        deps.get_audit: lambda: services.audit,
        deps.get_create_sale_use_case: lambda: CreateSaleUseCase(services.billing),
        deps.get_validate_dispensing_use_case: lambda: ValidateDispensingUseCase(
            services.billing
        ),
        deps.get_sales_report_use_case: lambda: GenerateSalesReportUseCase(services.billing),
        deps.get_upload_prescription_use_case: lambda: UploadPrescriptionUseCase(
            services.prescriptions
        ),
        deps.get_inventory_alerts_use_case: lambda: CheckInventoryAlertsUseCase(
            services.ledger
        ),
    }
    app.dependency_overrides.update(overrides)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()

