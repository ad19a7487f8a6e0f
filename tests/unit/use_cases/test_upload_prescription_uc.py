"""Unit tests for UploadPrescriptionUseCase."""

from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import UploadPrescriptionRequest
from src.application.use_cases.upload_prescription import UploadPrescriptionUseCase
from src.core.entities import ParsedMedication, PrescriptionFacts
from src.core.exceptions import MalformedBundleError
from tests.factories import make_prescription


def make_facts(prescription, medication_names=("Amoxicillin 500mg",)) -> PrescriptionFacts:
    return PrescriptionFacts(
        patient_name=prescription.patient_name,
        doctor_name=prescription.doctor_name,
        doctor_registration=prescription.doctor_registration,
        prescription_date=prescription.prescription_date,
        medications=[ParsedMedication(name=name) for name in medication_names],
    )


@pytest.fixture
def mock_service(sample_prescription):
    service = AsyncMock()
    service.upload = AsyncMock(
        return_value=(sample_prescription, make_facts(sample_prescription))
    )
    return service


async def test_upload_counts_medications(mock_service, sample_bundle, sample_prescription):
    use_case = UploadPrescriptionUseCase(prescription_service=mock_service)

    result = await use_case.execute(
        UploadPrescriptionRequest(fhir_bundle=sample_bundle, notes="repeat"),
        actor_id="u1",
        source_ip="10.0.0.3",
    )

    assert result.prescription is sample_prescription
    assert result.medication_count == 1
    mock_service.upload.assert_awaited_once_with(
        bundle=sample_bundle, notes="repeat", actor_id="u1", source_ip="10.0.0.3"
    )


async def test_count_comes_from_service_facts(mock_service, sample_bundle, sample_prescription):
    mock_service.upload.return_value = (
        sample_prescription,
        make_facts(sample_prescription, ("Amoxicillin 500mg", "Paracetamol 650mg", "ORS")),
    )
    use_case = UploadPrescriptionUseCase(prescription_service=mock_service)

    result = await use_case.execute(
        UploadPrescriptionRequest(fhir_bundle=sample_bundle), actor_id="u1"
    )

    assert result.medication_count == 3


async def test_response_hides_bundle(mock_service, sample_bundle):
    use_case = UploadPrescriptionUseCase(prescription_service=mock_service)

    result = await use_case.execute(
        UploadPrescriptionRequest(fhir_bundle=sample_bundle), actor_id="u1"
    )
    body = use_case.to_response(result).model_dump(by_alias=True)

    assert body["doctorVerified"] is True
    assert body["fhirBundle"] is None


async def test_malformed_bundle_propagates(mock_service):
    mock_service.upload.side_effect = MalformedBundleError("Bundle has no entries")
    use_case = UploadPrescriptionUseCase(prescription_service=mock_service)

    with pytest.raises(MalformedBundleError):
        await use_case.execute(
            UploadPrescriptionRequest(fhir_bundle={"resourceType": "Bundle", "entry": []}),
            actor_id="u1",
        )


async def test_unverified_doctor_still_stored(sample_bundle):
    prescription = make_prescription(doctor_verified=False)
    service = AsyncMock()
    service.upload = AsyncMock(return_value=(prescription, make_facts(prescription)))
    use_case = UploadPrescriptionUseCase(prescription_service=service)

    result = await use_case.execute(
        UploadPrescriptionRequest(fhir_bundle=sample_bundle), actor_id="u1"
    )

    assert result.prescription.doctor_verified is False
