"""E-prescription entities."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class ParsedMedication(BaseModel):
    """One medication line extracted from a MedicationRequest."""

    name: str
    code: str | None = None
    dosage: str | None = None
    quantity: int | None = None
    duration: int | None = None  # Expected supply duration (days)
    instructions: str | None = None


class PrescriptionFacts(BaseModel):
    """Flat prescription record extracted from a FHIR bundle."""

    patient_name: str
    patient_id: str | None = None
    doctor_name: str
    doctor_registration: str
    prescription_date: datetime
    medications: list[ParsedMedication] = Field(default_factory=list)


class Prescription(BaseModel):
    """
    Stored e-prescription.

    The raw FHIR bundle is kept alongside the fields derived from it.
    Created once on upload and never edited afterwards.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    fhir_bundle: dict[str, Any]
    doctor_name: str
    doctor_registration: str
    doctor_verified: bool = False
    patient_name: str
    patient_id: str | None = None
    prescription_date: datetime
    stored_file_path: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
