"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.core.entities import Batch, Medicine
from src.infrastructure.storage.sqlite import (
    SQLiteAuditStore,
    SQLiteBatchStore,
    SQLiteMedicineStore,
    SQLitePrescriptionStore,
    SQLiteSalesStore,
)
from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database
from tests.factories import make_batch, make_medicine


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path) -> MagicMock:
    """Storage settings pointing at the temporary database."""
    settings = MagicMock()
    settings.storage.db_path = temp_db_path
    settings.storage.pool_size = 3
    settings.storage.busy_timeout = 5000
    return settings


@pytest.fixture
async def db(temp_db_path: Path, mock_settings: MagicMock) -> AsyncGenerator[Path, None]:
    """Migrated database wired into the global connection pool."""
    results = await initialize_database(temp_db_path)
    assert all(r.success for r in results)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await conn_module.close_pool()


@pytest.fixture
def medicine_store(db) -> SQLiteMedicineStore:
    return SQLiteMedicineStore()


@pytest.fixture
def batch_store(db) -> SQLiteBatchStore:
    return SQLiteBatchStore()


@pytest.fixture
def prescription_store(db) -> SQLitePrescriptionStore:
    return SQLitePrescriptionStore()


@pytest.fixture
def sales_store(db) -> SQLiteSalesStore:
    return SQLiteSalesStore()


@pytest.fixture
def audit_store(db) -> SQLiteAuditStore:
    return SQLiteAuditStore()


@pytest.fixture
async def stored_medicine(medicine_store: SQLiteMedicineStore) -> Medicine:
    return await medicine_store.create_medicine(make_medicine())


@pytest.fixture
async def stored_batch(batch_store: SQLiteBatchStore, stored_medicine: Medicine) -> Batch:
    return await batch_store.create_batch(make_batch(stored_medicine.id, quantity=10))
