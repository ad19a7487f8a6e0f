"""Fixtures for core service tests: store fakes built on AsyncMock."""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def medicine_store():
    return AsyncMock()


@pytest.fixture
def batch_store():
    return AsyncMock()


@pytest.fixture
def prescription_store():
    return AsyncMock()


@pytest.fixture
def sales_store():
    """Keeps created sales so the post-commit reload finds them."""
    store = AsyncMock()
    saved = {}

    async def create_sale(sale):
        saved[sale.id] = sale
        return sale

    async def get_sale(sale_id):
        return saved.get(sale_id)

    store.next_invoice_sequence.return_value = 1
    store.create_sale.side_effect = create_sale
    store.get_sale.side_effect = get_sale
    return store


@pytest.fixture
def audit_store():
    return AsyncMock()


@pytest.fixture
def audit_recorder():
    """Recorder stand-in; record() is synchronous."""
    return MagicMock()
