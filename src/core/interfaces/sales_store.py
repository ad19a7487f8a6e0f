"""Abstract interface for sales storage."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from src.core.entities.sale import Sale, SalesReport


class ISalesStore(ABC):
    """Interface for sale persistence."""

    @abstractmethod
    async def next_invoice_sequence(self, day_key: str) -> int:
        """
        Allocate the next invoice sequence number for a day.

        Must run inside the sale transaction so the counter and the sale
        commit or roll back together.
        """
        pass

    @abstractmethod
    async def create_sale(self, sale: Sale) -> Sale:
        """Create a sale with all its items."""
        pass

    @abstractmethod
    async def get_sale(self, sale_id: str) -> Sale | None:
        """Get sale by ID with items."""
        pass

    @abstractmethod
    async def list_sales(
        self,
        limit: int = 100,
        offset: int = 0,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Sale]:
        """List sales with pagination, newest first."""
        pass

    @abstractmethod
    async def sales_report(
        self, start: date | None = None, end: date | None = None
    ) -> SalesReport:
        """Aggregate sale counts and amounts for an inclusive date range."""
        pass
