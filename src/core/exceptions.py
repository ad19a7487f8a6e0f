"""
Domain exceptions for the RxDesk application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class RxDeskError(Exception):
    """Base exception for all RxDesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(RxDeskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class EmptySaleError(ValidationError):
    """Sale submitted without line items."""

    def __init__(self) -> None:
        super().__init__(field="items", message="Sale must have at least one item")
        self.code = "EMPTY_SALE"


class BatchMismatchError(ValidationError):
    """Batch does not belong to the requested medicine."""

    def __init__(self, batch_id: str, medicine_id: str):
        super().__init__(
            field="batch_id",
            message=f"Batch {batch_id} does not belong to medicine {medicine_id}",
            value=batch_id,
        )
        self.code = "BATCH_MISMATCH"
        self.details.update({"batch_id": batch_id, "medicine_id": medicine_id})


# Not Found Exceptions
class NotFoundError(RxDeskError):
    """Referenced entity does not exist."""

    def __init__(self, entity_type: str, entity_id: str, code: str | None = None):
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class MedicineNotFoundError(NotFoundError):
    def __init__(self, medicine_id: str):
        super().__init__("Medicine", medicine_id, code="MEDICINE_NOT_FOUND")


class BatchNotFoundError(NotFoundError):
    def __init__(self, batch_id: str):
        super().__init__("Batch", batch_id, code="BATCH_NOT_FOUND")


class PrescriptionNotFoundError(NotFoundError):
    def __init__(self, prescription_id: str):
        super().__init__("Prescription", prescription_id, code="PRESCRIPTION_NOT_FOUND")


class SaleNotFoundError(NotFoundError):
    def __init__(self, sale_id: str):
        super().__init__("Sale", sale_id, code="SALE_NOT_FOUND")


# Dispensing Exceptions
class ComplianceViolationError(RxDeskError):
    """A drug-schedule rule rejected the dispense."""

    def __init__(
        self,
        medicine_id: str,
        errors: list[str],
        warnings: list[str] | None = None,
    ):
        super().__init__(
            f"Compliance check failed for medicine {medicine_id}: {'; '.join(errors)}",
            code="COMPLIANCE_VIOLATION",
            details={
                "medicine_id": medicine_id,
                "errors": errors,
                "warnings": warnings or [],
            },
        )


class InsufficientStockError(RxDeskError):
    """Requested quantity exceeds what a batch or medicine holds."""

    def __init__(
        self,
        requested: int,
        available: int,
        batch_number: str | None = None,
        medicine_id: str | None = None,
    ):
        if batch_number is not None:
            message = (
                f"Insufficient stock in batch {batch_number}: "
                f"requested {requested}, available {available}"
            )
        else:
            message = (
                f"Insufficient stock for medicine {medicine_id}: "
                f"requested {requested}, available {available}"
            )
        super().__init__(
            message,
            code="INSUFFICIENT_STOCK",
            details={
                "batch_number": batch_number,
                "medicine_id": medicine_id,
                "requested": requested,
                "available": available,
            },
        )


# Prescription Exceptions
class MalformedBundleError(RxDeskError):
    """FHIR bundle failed a structural precondition."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid FHIR bundle: {reason}",
            code="MALFORMED_BUNDLE",
            details={"reason": reason},
        )
        self.reason = reason


# Storage Exceptions
class StorageError(RxDeskError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(RxDeskError):
    """Configuration error."""

    pass
