"""Upload Prescription Use Case: parses and stores a FHIR prescription bundle."""

from dataclasses import dataclass

from src.application.dto.requests import UploadPrescriptionRequest
from src.application.dto.responses import PrescriptionResponse
from src.config import get_logger
from src.core.entities.prescription import Prescription
from src.core.services.prescription_service import PrescriptionService

logger = get_logger(__name__)


@dataclass
class UploadPrescriptionResult:
    """Result of a prescription upload."""

    prescription: Prescription
    medication_count: int


class UploadPrescriptionUseCase:
    """
    Use case for uploading an ABDM/FHIR R4 prescription bundle.

    Steps:
    1. Structural validation of the bundle
    2. Extraction of patient, doctor and medication facts
    3. Doctor registration format check
    4. Persistence plus the raw bundle written to prescription storage
    """

    def __init__(self, prescription_service: PrescriptionService | None = None):
        self._service = prescription_service

    async def _get_service(self) -> PrescriptionService:
        if self._service is None:
            from src.application.services import get_prescription_service

            self._service = await get_prescription_service()
        return self._service

    async def execute(
        self,
        request: UploadPrescriptionRequest,
        actor_id: str,
        source_ip: str | None = None,
    ) -> UploadPrescriptionResult:
        """
        Execute upload use case.

        Raises:
            MalformedBundleError: Bundle fails validation or extraction
        """
        logger.info("upload_prescription_started", actor_id=actor_id)

        service = await self._get_service()
        prescription, facts = await service.upload(
            bundle=request.fhir_bundle,
            notes=request.notes,
            actor_id=actor_id,
            source_ip=source_ip,
        )
        medication_count = len(facts.medications)

        logger.info(
            "upload_prescription_complete",
            prescription_id=prescription.id,
            doctor_verified=prescription.doctor_verified,
            medications=medication_count,
        )

        return UploadPrescriptionResult(
            prescription=prescription,
            medication_count=medication_count,
        )

    def to_response(self, result: UploadPrescriptionResult) -> PrescriptionResponse:
        """Convert result to API response."""
        return PrescriptionResponse.from_entity(result.prescription)
