"""Compliance rule and result entities."""

from pydantic import BaseModel, ConfigDict, Field

from src.core.entities.medicine import ScheduleType


class ComplianceRule(BaseModel):
    """Dispensing constraints attached to a drug schedule."""

    model_config = ConfigDict(frozen=True)

    schedule_type: ScheduleType
    requires_prescription: bool
    requires_doctor_verification: bool
    retention_years: int  # How long the prescription must be kept
    max_quantity_per_dispense: int | None = None
    special_logging: bool = False
    description: str = ""


class ComplianceResult(BaseModel):
    """Outcome of checking a dispense against the rule table."""

    allowed: bool
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class DoctorRegistrationResult(BaseModel):
    """Outcome of a registration-number format check."""

    valid: bool
    council_type: str | None = None
    error: str | None = None
