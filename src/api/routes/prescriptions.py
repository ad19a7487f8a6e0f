"""E-prescription endpoints."""

from datetime import date, datetime, time

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_actor_id,
    get_client_ip,
    get_prescriptions,
    get_upload_prescription_use_case,
)
from src.application.dto.requests import UploadPrescriptionRequest, VerifyDoctorRequest
from src.application.dto.responses import (
    DoctorVerificationResponse,
    ErrorResponse,
    ParsedPrescriptionResponse,
    PrescriptionListResponse,
    PrescriptionResponse,
)
from src.application.use_cases import UploadPrescriptionUseCase
from src.core.services import PrescriptionService

router = APIRouter(prefix="/api/prescriptions", tags=["prescriptions"])


@router.post(
    "/upload",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def upload_prescription(
    request: UploadPrescriptionRequest,
    actor_id: str = Depends(get_actor_id),
    client_ip: str | None = Depends(get_client_ip),
    use_case: UploadPrescriptionUseCase = Depends(get_upload_prescription_use_case),
) -> PrescriptionResponse:
    """Upload an ABDM/FHIR R4 prescription bundle."""
    result = await use_case.execute(request, actor_id=actor_id, source_ip=client_ip)
    return use_case.to_response(result)


@router.get("", response_model=PrescriptionListResponse)
async def list_prescriptions(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    patient_name: str | None = Query(default=None, alias="patientName"),
    doctor_name: str | None = Query(default=None, alias="doctorName"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    service: PrescriptionService = Depends(get_prescriptions),
) -> PrescriptionListResponse:
    """List prescriptions, newest first, filtered by patient, doctor or date."""
    prescriptions = await service.list_prescriptions(
        limit=limit + 1,
        offset=offset,
        patient_name=patient_name,
        doctor_name=doctor_name,
        start=datetime.combine(start_date, time.min) if start_date else None,
        end=datetime.combine(end_date, time.max) if end_date else None,
    )
    page = prescriptions[:limit]
    return PrescriptionListResponse(
        prescriptions=[PrescriptionResponse.from_entity(p) for p in page],
        total=offset + len(page),
        limit=limit,
        offset=offset,
        has_more=len(prescriptions) > limit,
    )


@router.post("/verify-doctor", response_model=DoctorVerificationResponse)
async def verify_doctor(request: VerifyDoctorRequest) -> DoctorVerificationResponse:
    """Check a doctor registration number against known council formats."""
    result = PrescriptionService.verify_doctor(request.registration_number)
    return DoctorVerificationResponse.from_entity(result)


@router.get(
    "/{prescription_id}",
    response_model=PrescriptionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_prescription(
    prescription_id: str,
    service: PrescriptionService = Depends(get_prescriptions),
) -> PrescriptionResponse:
    """Get a prescription including its raw bundle."""
    prescription = await service.get(prescription_id)
    return PrescriptionResponse.from_entity(prescription, include_bundle=True)


@router.get(
    "/{prescription_id}/parsed",
    response_model=ParsedPrescriptionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_parsed_prescription(
    prescription_id: str,
    service: PrescriptionService = Depends(get_prescriptions),
) -> ParsedPrescriptionResponse:
    """Patient, doctor and medication facts extracted from the stored bundle."""
    facts = await service.get_parsed(prescription_id)
    return ParsedPrescriptionResponse.from_entity(facts)
