"""Validate Dispensing Use Case: dry-run schedule check for one medicine."""

from dataclasses import dataclass

from src.application.dto.requests import ValidateDispensingRequest
from src.application.dto.responses import ComplianceResultResponse
from src.core.entities.compliance import ComplianceResult
from src.core.services.billing_engine import BillingEngine


@dataclass
class ValidateDispensingResult:
    medicine_id: str
    quantity: int
    compliance: ComplianceResult


class ValidateDispensingUseCase:
    """Check whether a medicine may be dispensed without touching stock."""

    def __init__(self, billing_engine: BillingEngine | None = None):
        self._engine = billing_engine

    async def _get_engine(self) -> BillingEngine:
        if self._engine is None:
            from src.application.services import get_billing_engine

            self._engine = await get_billing_engine()
        return self._engine

    async def execute(self, request: ValidateDispensingRequest) -> ValidateDispensingResult:
        engine = await self._get_engine()
        compliance = await engine.validate_dispensing(
            medicine_id=request.medicine_id,
            quantity=request.quantity,
            prescription_id=request.prescription_id,
        )
        return ValidateDispensingResult(
            medicine_id=request.medicine_id,
            quantity=request.quantity,
            compliance=compliance,
        )

    def to_response(self, result: ValidateDispensingResult) -> ComplianceResultResponse:
        return ComplianceResultResponse.from_entity(result.compliance)
