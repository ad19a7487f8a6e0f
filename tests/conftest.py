"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from src.core.entities import Batch, Medicine, Prescription
from tests.factories import make_batch, make_bundle, make_medicine, make_prescription


@pytest.fixture
def sample_medicine() -> Medicine:
    return make_medicine()


@pytest.fixture
def sample_batch(sample_medicine: Medicine) -> Batch:
    return make_batch(sample_medicine.id)


@pytest.fixture
def sample_bundle() -> dict[str, Any]:
    return make_bundle()


@pytest.fixture
def sample_prescription() -> Prescription:
    return make_prescription()
