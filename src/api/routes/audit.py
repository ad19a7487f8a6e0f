"""Audit trail endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_audit
from src.application.dto.responses import AuditLogListResponse, AuditLogResponse
from src.core.services import AuditRecorderService

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.get("", response_model=AuditLogListResponse)
async def query_audit_logs(
    user_id: str | None = Query(default=None, alias="userId"),
    action: str | None = Query(default=None),
    entity_type: str | None = Query(default=None, alias="entityType"),
    start: datetime | None = Query(default=None, alias="startDate"),
    end: datetime | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    recorder: AuditRecorderService = Depends(get_audit),
) -> AuditLogListResponse:
    """Audit entries, newest first."""
    entries = await recorder.query(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        start=start,
        end=end,
        limit=limit + 1,
        offset=offset,
    )
    page = entries[:limit]
    return AuditLogListResponse(
        logs=[AuditLogResponse.from_entity(e) for e in page],
        total=offset + len(page),
        limit=limit,
        offset=offset,
        has_more=len(entries) > limit,
    )
