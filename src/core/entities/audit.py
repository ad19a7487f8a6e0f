"""Audit trail entities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    """State-changing operations recorded in the audit trail."""

    SALE_CREATE = "SALE_CREATE"
    PRESCRIPTION_UPLOAD = "PRESCRIPTION_UPLOAD"
    MEDICINE_CREATE = "MEDICINE_CREATE"
    MEDICINE_UPDATE = "MEDICINE_UPDATE"
    BATCH_CREATE = "BATCH_CREATE"
    BATCH_QUANTITY_UPDATE = "BATCH_QUANTITY_UPDATE"


class AuditLogEntry(BaseModel):
    """Append-only record of a state-changing operation."""

    id: int | None = None
    user_id: str | None = None
    action: str  # AuditAction value
    entity_type: str
    entity_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    ip_address: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
