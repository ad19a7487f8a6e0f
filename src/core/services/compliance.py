"""
Drug schedule compliance rules.

Static rule table for the India drug schedules (OTC, H, H1, X) plus the
pure checks built on it:
- dispense validation against a schedule
- doctor registration number format validation
- GST rate lookup by HSN code
- prescription validity windows

NO infrastructure imports. Everything here is a pure function of its inputs.
"""

import re
from datetime import datetime, timedelta
from decimal import Decimal

from src.core.entities.compliance import (
    ComplianceResult,
    ComplianceRule,
    DoctorRegistrationResult,
)
from src.core.entities.medicine import ScheduleType

COMPLIANCE_RULES: dict[ScheduleType, ComplianceRule] = {
    ScheduleType.OTC: ComplianceRule(
        schedule_type=ScheduleType.OTC,
        requires_prescription=False,
        requires_doctor_verification=False,
        retention_years=0,
        description="Over-the-counter medicines, no prescription required",
    ),
    ScheduleType.H: ComplianceRule(
        schedule_type=ScheduleType.H,
        requires_prescription=True,
        requires_doctor_verification=True,
        retention_years=1,
        description="Prescription required, retain for 1 year",
    ),
    ScheduleType.H1: ComplianceRule(
        schedule_type=ScheduleType.H1,
        requires_prescription=True,
        requires_doctor_verification=True,
        retention_years=2,
        special_logging=True,
        description="Prescription required with stricter controls, retain for 2 years",
    ),
    ScheduleType.X: ComplianceRule(
        schedule_type=ScheduleType.X,
        requires_prescription=True,
        requires_doctor_verification=True,
        retention_years=2,
        max_quantity_per_dispense=30,
        special_logging=True,
        description="Narcotic/psychotropic, special prescription and register required",
    ),
}

SCHEDULE_WARNINGS: dict[ScheduleType, str] = {
    ScheduleType.X: "Schedule X medicine - Ensure proper documentation and retention",
    ScheduleType.H1: "Schedule H1 medicine - Additional warnings must be provided to patient",
}

# Days a prescription stays valid for dispensing
PRESCRIPTION_VALIDITY_DAYS: dict[ScheduleType, int | None] = {
    ScheduleType.OTC: None,
    ScheduleType.H: 30,
    ScheduleType.H1: 30,
    ScheduleType.X: 7,
}

# Order matters: first match wins
REGISTRATION_PATTERNS: list[tuple[str, re.Pattern[str], str]] = [
    ("MCI", re.compile(r"^[A-Z]{2}/\d{4,6}$"), "XX/12345"),
    ("STATE", re.compile(r"^[A-Z]{2}-[A-Z]{3}-\d{4,6}$"), "XX-XXX-12345"),
    ("AYUSH", re.compile(r"^AYUSH-[A-Z]{2}-\d{4,6}$"), "AYUSH-XX-12345"),
    ("DENTAL", re.compile(r"^[A-Z]{2}-DC-\d{4,6}$"), "XX-DC-12345"),
]

GST_RATES: dict[str, Decimal] = {
    "general_medicines": Decimal("12"),
    "lifesaving_drugs": Decimal("5"),
    "exempt": Decimal("0"),
    "medical_devices": Decimal("12"),
}

# HSN chapter prefixes with a known slab; first match wins.
HSN_GST_SLABS: list[tuple[str, str]] = [
    ("3003", "general_medicines"),
    ("3004", "general_medicines"),
]
DEFAULT_GST_SLAB = "general_medicines"


def rule_for(schedule: ScheduleType) -> ComplianceRule:
    """Get the dispensing constraints for a schedule."""
    return COMPLIANCE_RULES[schedule]


def validate_dispense(
    schedule: ScheduleType,
    has_prescription: bool,
    doctor_verified: bool,
    quantity: int,
) -> ComplianceResult:
    """
    Check a dispense of ``quantity`` units against the schedule's rule.

    Errors block the dispense. Warnings are informational and only
    accompany Schedule X and H1.
    """
    rule = rule_for(schedule)
    errors: list[str] = []
    warnings: list[str] = []

    if rule.requires_prescription and not has_prescription:
        errors.append(f"Prescription required for Schedule {schedule.value} medicine")

    if rule.requires_doctor_verification and not doctor_verified:
        errors.append(
            f"Doctor verification required for Schedule {schedule.value} medicine"
        )

    limit = rule.max_quantity_per_dispense
    if limit is not None and quantity > limit:
        errors.append(
            f"Quantity {quantity} exceeds maximum allowed ({limit}) "
            f"for Schedule {schedule.value}"
        )

    if schedule in SCHEDULE_WARNINGS:
        warnings.append(SCHEDULE_WARNINGS[schedule])

    return ComplianceResult(allowed=not errors, warnings=warnings, errors=errors)


def validate_doctor_registration(registration: str | None) -> DoctorRegistrationResult:
    """
    Validate the format of a doctor registration number.

    Only the shape is checked; no council registry is consulted.
    """
    if not registration or not registration.strip():
        return DoctorRegistrationResult(
            valid=False, error="Registration number is required"
        )

    normalized = registration.strip().upper()
    for council_type, pattern, _example in REGISTRATION_PATTERNS:
        if pattern.match(normalized):
            return DoctorRegistrationResult(valid=True, council_type=council_type)

    expected = ", ".join(
        f"{council} ({example})" for council, _p, example in REGISTRATION_PATTERNS
    )
    return DoctorRegistrationResult(
        valid=False,
        error=f"Invalid registration number format. Expected one of: {expected}",
    )


def gst_slab_for(hsn_code: str | None) -> str:
    """Name of the GST slab an HSN code falls under."""
    code = (hsn_code or "").strip()
    for prefix, slab in HSN_GST_SLABS:
        if code.startswith(prefix):
            return slab
    return DEFAULT_GST_SLAB


def gst_rate_for(hsn_code: str | None) -> Decimal:
    """
    GST percentage applicable to an HSN code.

    Medicines under HSN 3003/3004 take the general medicines slab; any
    other code falls back to the default slab.
    """
    return GST_RATES[gst_slab_for(hsn_code)]


def is_prescription_valid(
    prescription_date: datetime,
    schedule: ScheduleType,
    now: datetime | None = None,
) -> bool:
    """Whether a prescription is still inside the schedule's validity window."""
    days = PRESCRIPTION_VALIDITY_DAYS[schedule]
    if days is None:
        return True
    now = now or datetime.now()
    if prescription_date.tzinfo is not None and now.tzinfo is None:
        prescription_date = prescription_date.astimezone().replace(tzinfo=None)
    return now - prescription_date <= timedelta(days=days)
