"""Tests for SQLite prescription store."""

from datetime import datetime

from src.infrastructure.storage.sqlite.prescription_store import SQLitePrescriptionStore
from tests.factories import make_prescription


class TestPrescriptionStore:
    async def test_round_trips_bundle(self, prescription_store: SQLitePrescriptionStore):
        prescription = make_prescription(notes="repeat in 30 days")
        await prescription_store.create_prescription(prescription)

        loaded = await prescription_store.get_prescription(prescription.id)

        assert loaded.fhir_bundle == prescription.fhir_bundle
        assert loaded.doctor_verified is True
        assert loaded.patient_id == "91-1234-5678-9012"
        assert loaded.notes == "repeat in 30 days"
        assert loaded.stored_file_path is None

    async def test_get_missing(self, prescription_store: SQLitePrescriptionStore):
        assert await prescription_store.get_prescription("nope") is None

    async def test_set_stored_file_path(self, prescription_store: SQLitePrescriptionStore):
        prescription = await prescription_store.create_prescription(make_prescription())

        await prescription_store.set_stored_file_path(prescription.id, "/data/rx/p.json")

        loaded = await prescription_store.get_prescription(prescription.id)
        assert loaded.stored_file_path == "/data/rx/p.json"

    async def test_list_filters(self, prescription_store: SQLitePrescriptionStore):
        await prescription_store.create_prescription(
            make_prescription(patient_name="Asha Verma", prescription_date=datetime(2025, 1, 5))
        )
        await prescription_store.create_prescription(
            make_prescription(
                patient_name="Vikram Rao",
                doctor_name="Meera Iyer",
                prescription_date=datetime(2025, 2, 5),
            )
        )

        by_patient = await prescription_store.list_prescriptions(patient_name="asha")
        assert [p.patient_name for p in by_patient] == ["Asha Verma"]

        by_doctor = await prescription_store.list_prescriptions(doctor_name="Iyer")
        assert [p.patient_name for p in by_doctor] == ["Vikram Rao"]

        by_date = await prescription_store.list_prescriptions(
            start=datetime(2025, 2, 1), end=datetime(2025, 2, 28)
        )
        assert [p.patient_name for p in by_date] == ["Vikram Rao"]
