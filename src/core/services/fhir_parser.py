"""
FHIR R4 prescription bundle parser.

Extracts patient, practitioner and medication facts from ABDM/NDHM
style e-prescription bundles. The bundle is treated as an untrusted JSON
tree: a node of the wrong type is read as absent rather than crashing.

NO infrastructure imports.
"""

from datetime import datetime
from typing import Any

from src.core.entities.prescription import ParsedMedication, PrescriptionFacts
from src.core.exceptions import MalformedBundleError

PATIENT_ID_SYSTEM_MARKERS = ("healthid", "abdm")
REGISTRATION_SYSTEM_MARKERS = ("medical-council", "nmc", "mci", "doctor")

UNKNOWN_MEDICATION = "Unknown Medication"


def _dict(node: Any) -> dict[str, Any]:
    return node if isinstance(node, dict) else {}


def _list(node: Any) -> list[Any]:
    return node if isinstance(node, list) else []


def _str(node: Any) -> str | None:
    return node if isinstance(node, str) and node else None


def _first(node: Any) -> dict[str, Any]:
    items = _list(node)
    return _dict(items[0]) if items else {}


def _number(node: Any) -> int | None:
    # bool is an int subclass but never a quantity
    if isinstance(node, bool):
        return None
    if isinstance(node, int):
        return node
    if isinstance(node, float):
        return int(node)
    return None


class FHIRBundleParser:
    """
    Parser for FHIR prescription bundles.

    A valid prescription bundle carries exactly one Patient, exactly one
    Practitioner and at least one MedicationRequest.
    """

    def validate_bundle(self, bundle: Any) -> list[str]:
        """
        Check the bundle envelope.

        Returns:
            Every structural problem found (empty if the envelope is valid)
        """
        if not isinstance(bundle, dict):
            return ["Bundle is null or not an object"]

        errors: list[str] = []
        if bundle.get("resourceType") != "Bundle":
            errors.append("Invalid resourceType: expected Bundle")

        entries = bundle.get("entry")
        if not isinstance(entries, list):
            errors.append("Missing or invalid entry array")
        elif not entries:
            errors.append("Bundle has no entries")

        return errors

    def parse(self, bundle: Any) -> PrescriptionFacts:
        """
        Parse a bundle into prescription facts.

        Raises:
            MalformedBundleError: If a required resource or field is missing
        """
        bundle = _dict(bundle)
        if bundle.get("resourceType") != "Bundle":
            raise MalformedBundleError("resourceType must be Bundle")

        entries = _list(bundle.get("entry"))
        if not entries:
            raise MalformedBundleError("missing or empty entry list")

        resources = [_dict(_dict(entry).get("resource")) for entry in entries]

        patient = self._single(resources, "Patient")
        practitioner = self._single(resources, "Practitioner")

        requests = [r for r in resources if r.get("resourceType") == "MedicationRequest"]
        if not requests:
            raise MalformedBundleError("No medication requests found")

        return PrescriptionFacts(
            patient_name=self._human_name(patient, "Patient"),
            patient_id=self._patient_id(patient),
            doctor_name=self._human_name(practitioner, "Practitioner"),
            doctor_registration=self._doctor_registration(practitioner),
            prescription_date=self._authored_on(requests[0]),
            medications=[self._medication(r) for r in requests],
        )

    @staticmethod
    def _single(resources: list[dict[str, Any]], resource_type: str) -> dict[str, Any]:
        matches = [r for r in resources if r.get("resourceType") == resource_type]
        if not matches:
            raise MalformedBundleError(f"{resource_type} resource not found")
        if len(matches) > 1:
            raise MalformedBundleError(f"multiple {resource_type} resources found")
        return matches[0]

    @staticmethod
    def _human_name(resource: dict[str, Any], resource_type: str) -> str:
        name = _first(resource.get("name"))
        text = _str(name.get("text"))
        if text:
            return text

        given = " ".join(g for g in _list(name.get("given")) if isinstance(g, str))
        family = _str(name.get("family")) or ""
        full = f"{given} {family}".strip()
        if not full:
            raise MalformedBundleError(f"{resource_type} name not found")
        return full

    @staticmethod
    def _patient_id(patient: dict[str, Any]) -> str | None:
        identifiers = [_dict(i) for i in _list(patient.get("identifier"))]
        if identifiers:
            for identifier in identifiers:
                system = (_str(identifier.get("system")) or "").lower()
                value = _str(identifier.get("value"))
                if value and any(m in system for m in PATIENT_ID_SYSTEM_MARKERS):
                    return value
            return _str(identifiers[0].get("value"))
        return _str(patient.get("id"))

    @staticmethod
    def _doctor_registration(practitioner: dict[str, Any]) -> str:
        identifiers = [_dict(i) for i in _list(practitioner.get("identifier"))]
        for identifier in identifiers:
            system = (_str(identifier.get("system")) or "").lower()
            value = _str(identifier.get("value"))
            if value and any(m in system for m in REGISTRATION_SYSTEM_MARKERS):
                return value

        if identifiers:
            value = _str(identifiers[0].get("value"))
            if value:
                return value

        raise MalformedBundleError("Doctor registration number not found")

    @staticmethod
    def _authored_on(request: dict[str, Any]) -> datetime:
        raw = request.get("authoredOn")
        if raw is None:
            return datetime.now()
        if not isinstance(raw, str):
            raise MalformedBundleError("authoredOn is not a date string")

        try:
            # fromisoformat on 3.11+ accepts the trailing Z
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise MalformedBundleError(f"unparseable authoredOn: {raw}")

        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    @staticmethod
    def _medication(request: dict[str, Any]) -> ParsedMedication:
        concept = _dict(request.get("medicationCodeableConcept"))
        coding = _first(concept.get("coding"))

        name = _str(concept.get("text")) or _str(coding.get("display")) or UNKNOWN_MEDICATION

        instruction = _first(request.get("dosageInstruction"))
        dose = _dict(_first(instruction.get("doseAndRate")).get("doseQuantity"))
        dosage = None
        if dose:
            value = dose.get("value")
            unit = _str(dose.get("unit")) or ""
            dosage = f"{value if value is not None else ''} {unit}".strip() or None

        dispense = _dict(request.get("dispenseRequest"))
        return ParsedMedication(
            name=name,
            code=_str(coding.get("code")),
            dosage=dosage,
            quantity=_number(_dict(dispense.get("quantity")).get("value")),
            duration=_number(_dict(dispense.get("expectedSupplyDuration")).get("value")),
            instructions=_str(instruction.get("text")),
        )
