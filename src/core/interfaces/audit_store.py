"""Abstract interface for audit trail storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from src.core.entities.audit import AuditLogEntry


class IAuditStore(ABC):
    """Interface for append-only audit log persistence."""

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry to the audit log."""
        pass

    @abstractmethod
    async def query(
        self,
        user_id: str | None = None,
        action: str | None = None,
        entity_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """Query entries, newest first."""
        pass
