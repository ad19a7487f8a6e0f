"""Tests for medicine and batch entities."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.entities import Batch, Medicine, ScheduleType
from tests.factories import make_batch, make_medicine


class TestMedicine:
    def test_defaults(self):
        medicine = make_medicine()
        assert medicine.id
        assert medicine.schedule_type == ScheduleType.OTC
        assert medicine.reorder_level == 10
        assert medicine.is_active is True

    def test_ids_are_unique(self):
        assert make_medicine().id != make_medicine().id

    def test_schedule_from_string(self):
        medicine = Medicine(
            name="Alprazolam",
            generic_name="Alprazolam",
            manufacturer="Acme",
            schedule_type="X",
            hsn_code="30049099",
            unit_price=Decimal("5"),
        )
        assert medicine.schedule_type == ScheduleType.X


class TestBatch:
    def test_expiry_must_follow_manufacture(self):
        today = date.today()
        with pytest.raises(ValidationError):
            make_batch("m-1", manufacture_date=today, expiry_date=today)

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            make_batch("m-1", quantity=-1)

    def test_expiring_today_is_expired(self):
        today = date(2025, 6, 1)
        batch = make_batch(
            "m-1",
            manufacture_date=date(2024, 1, 1),
            expiry_date=today,
        )
        assert batch.is_expired(today) is True
        assert batch.is_expired(today - timedelta(days=1)) is False

    def test_days_until_expiry(self):
        batch = make_batch(
            "m-1",
            manufacture_date=date(2024, 1, 1),
            expiry_date=date(2025, 1, 31),
        )
        assert batch.days_until_expiry(date(2025, 1, 1)) == 30

    def test_is_batch(self):
        assert isinstance(make_batch("m-1"), Batch)
