"""Abstract interface for prescription storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.entities.prescription import Prescription


class IPrescriptionStore(ABC):
    """Interface for e-prescription persistence."""

    @abstractmethod
    async def create_prescription(self, prescription: Prescription) -> Prescription:
        """Create a new prescription."""
        pass

    @abstractmethod
    async def get_prescription(self, prescription_id: str) -> Prescription | None:
        """Get prescription by ID."""
        pass

    @abstractmethod
    async def list_prescriptions(
        self,
        limit: int = 100,
        offset: int = 0,
        patient_name: str | None = None,
        doctor_name: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Prescription]:
        """List prescriptions, newest first, with optional filters."""
        pass

    @abstractmethod
    async def set_stored_file_path(self, prescription_id: str, path: str) -> None:
        """Record where the raw bundle was written on disk."""
        pass
