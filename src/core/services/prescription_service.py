"""
Prescription service.

Upload, verification and retrieval of FHIR e-prescriptions. The raw
bundle is stored in the database and also written to a JSON file;
a failed file write is logged and does not fail the upload.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from src.config import get_logger
from src.core.entities.audit import AuditAction
from src.core.entities.compliance import DoctorRegistrationResult
from src.core.entities.prescription import Prescription, PrescriptionFacts
from src.core.exceptions import MalformedBundleError, PrescriptionNotFoundError
from src.core.interfaces import IPrescriptionStore
from src.core.services.audit_recorder import AuditRecorderService
from src.core.services.compliance import validate_doctor_registration
from src.core.services.fhir_parser import FHIRBundleParser

logger = get_logger(__name__)


class PrescriptionService:
    """
    E-prescription management.

    Required interfaces for DI:
    - IPrescriptionStore: prescription persistence
    - FHIRBundleParser: bundle parsing (default instance if omitted)
    - AuditRecorderService: optional audit trail
    """

    def __init__(
        self,
        prescription_store: IPrescriptionStore,
        storage_dir: Path | None = None,
        parser: FHIRBundleParser | None = None,
        audit_recorder: AuditRecorderService | None = None,
    ):
        self._store = prescription_store
        self._storage_dir = storage_dir
        self._parser = parser or FHIRBundleParser()
        self._audit = audit_recorder

    async def upload(
        self,
        bundle: dict[str, Any],
        notes: str | None = None,
        actor_id: str | None = None,
        source_ip: str | None = None,
    ) -> tuple[Prescription, PrescriptionFacts]:
        """
        Validate, parse and store a FHIR prescription bundle.

        Returns the stored prescription with the facts parsed from it.

        The doctor is marked verified when the registration number has a
        recognised council format.

        Raises:
            MalformedBundleError: If the bundle fails validation or parsing
        """
        problems = self._parser.validate_bundle(bundle)
        if problems:
            raise MalformedBundleError(", ".join(problems))

        facts = self._parser.parse(bundle)
        registration = validate_doctor_registration(facts.doctor_registration)

        prescription = await self._store.create_prescription(
            Prescription(
                fhir_bundle=bundle,
                doctor_name=facts.doctor_name,
                doctor_registration=facts.doctor_registration,
                doctor_verified=registration.valid,
                patient_name=facts.patient_name,
                patient_id=facts.patient_id,
                prescription_date=facts.prescription_date,
                notes=notes,
            )
        )

        stored_path = self._write_bundle_file(prescription.id, bundle)
        if stored_path is not None:
            await self._store.set_stored_file_path(prescription.id, stored_path)
            prescription.stored_file_path = stored_path

        logger.info(
            "prescription_uploaded",
            prescription_id=prescription.id,
            doctor_verified=prescription.doctor_verified,
            medications=len(facts.medications),
        )

        if self._audit is not None:
            self._audit.record(
                AuditAction.PRESCRIPTION_UPLOAD,
                entity_type="Prescription",
                entity_id=prescription.id,
                actor_id=actor_id,
                details={
                    "doctor_registration": prescription.doctor_registration,
                    "doctor_verified": prescription.doctor_verified,
                    "medications": len(facts.medications),
                },
                source_ip=source_ip,
            )

        return prescription, facts

    async def get(self, prescription_id: str) -> Prescription:
        prescription = await self._store.get_prescription(prescription_id)
        if prescription is None:
            raise PrescriptionNotFoundError(prescription_id)
        return prescription

    async def get_parsed(self, prescription_id: str) -> PrescriptionFacts:
        """Re-parse the stored bundle of a prescription."""
        prescription = await self.get(prescription_id)
        return self._parser.parse(prescription.fhir_bundle)

    async def list_prescriptions(
        self,
        limit: int = 20,
        offset: int = 0,
        patient_name: str | None = None,
        doctor_name: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Prescription]:
        return await self._store.list_prescriptions(
            limit=limit,
            offset=offset,
            patient_name=patient_name,
            doctor_name=doctor_name,
            start=start,
            end=end,
        )

    @staticmethod
    def verify_doctor(registration_number: str) -> DoctorRegistrationResult:
        """Format check only; no council registry lookup is performed."""
        return validate_doctor_registration(registration_number)

    def _write_bundle_file(self, prescription_id: str, bundle: dict[str, Any]) -> str | None:
        if self._storage_dir is None:
            return None

        path = self._storage_dir / f"prescription_{prescription_id}.json"
        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(bundle, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(
                "prescription_file_write_failed",
                prescription_id=prescription_id,
                path=str(path),
                error=str(e),
            )
            return None

        logger.info("prescription_file_stored", path=str(path))
        return str(path)
