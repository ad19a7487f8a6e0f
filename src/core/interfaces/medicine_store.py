"""Abstract interfaces for medicine and batch storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.medicine import Batch, Medicine


class IMedicineStore(ABC):
    """Interface for medicine master-data persistence."""

    @abstractmethod
    async def create_medicine(self, medicine: Medicine) -> Medicine:
        """Create a new medicine."""
        pass

    @abstractmethod
    async def get_medicine(self, medicine_id: str) -> Medicine | None:
        """Get medicine by ID."""
        pass

    @abstractmethod
    async def update_medicine(self, medicine: Medicine) -> Medicine:
        """Persist changes to an existing medicine."""
        pass

    @abstractmethod
    async def list_medicines(
        self,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
        active_only: bool = True,
    ) -> list[Medicine]:
        """List medicines, optionally filtered by a name search."""
        pass

    @abstractmethod
    async def list_all_active(self) -> list[Medicine]:
        """Every active medicine, ordered by name."""
        pass

    @abstractmethod
    async def has_dispensing_history(self, medicine_id: str) -> bool:
        """Whether any sale line references the medicine."""
        pass


class IBatchStore(ABC):
    """Interface for batch persistence and stock mutation."""

    @abstractmethod
    async def create_batch(self, batch: Batch) -> Batch:
        """Create a new batch."""
        pass

    @abstractmethod
    async def get_batch(self, batch_id: str) -> Batch | None:
        """Get batch by ID."""
        pass

    @abstractmethod
    async def list_batches(self, medicine_id: str) -> list[Batch]:
        """List every batch of a medicine, soonest expiry first."""
        pass

    @abstractmethod
    async def list_available(self, medicine_id: str, today: date) -> list[Batch]:
        """
        List active batches of a medicine expiring after ``today``.

        Depleted batches are included. Ordered by expiry ascending.
        """
        pass

    @abstractmethod
    async def available_totals(self, today: date) -> dict[str, int]:
        """Sellable quantity per medicine ID."""
        pass

    @abstractmethod
    async def list_expiring(self, today: date, until: date) -> list[Batch]:
        """Active in-stock batches expiring after ``today`` and on or before ``until``."""
        pass

    @abstractmethod
    async def decrement_quantity(self, batch_id: str, quantity: int) -> None:
        """
        Conditionally decrement a batch's on-hand quantity.

        Raises:
            InsufficientStockError: If the batch holds less than ``quantity``
        """
        pass

    @abstractmethod
    async def update_quantity(self, batch_id: str, quantity: int) -> Batch | None:
        """Set a batch's on-hand quantity (stock count correction)."""
        pass
