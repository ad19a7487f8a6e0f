"""
Audit recorder.

Post-commit audit trail. Callers hand entries to an in-memory queue and
return immediately; a background worker persists them through the
injected IAuditStore. Recording never raises into the caller: a full
queue drops the entry and a failed write is logged.

NO infrastructure imports.
"""

import asyncio
from datetime import datetime
from typing import Any

from src.config import get_logger
from src.config.logging import CREDENTIAL_KEYS, redact
from src.core.entities.audit import AuditAction, AuditLogEntry
from src.core.interfaces import IAuditStore

logger = get_logger(__name__)


def sanitize_details(value: Any) -> Any:
    """Redact credential-looking fields anywhere in a JSON-like payload."""
    return redact(value, CREDENTIAL_KEYS)


class AuditRecorderService:
    """
    Queue-backed, fire-and-forget audit recorder.

    Required interfaces for DI:
    - IAuditStore: append-only audit persistence
    """

    DEFAULT_QUEUE_SIZE = 1000

    def __init__(
        self,
        audit_store: IAuditStore,
        queue_size: int | None = None,
        enabled: bool = True,
    ):
        self._store = audit_store
        self._enabled = enabled
        self._queue: asyncio.Queue[AuditLogEntry] = asyncio.Queue(
            maxsize=queue_size or self.DEFAULT_QUEUE_SIZE
        )
        self._worker: asyncio.Task | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Start the background writer on the running loop."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="audit-recorder")
            logger.info("audit_recorder_started")

    async def stop(self) -> None:
        """Flush pending entries and stop the writer."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
            logger.info("audit_recorder_stopped")

    def record(
        self,
        action: AuditAction | str,
        entity_type: str,
        entity_id: str | None = None,
        actor_id: str | None = None,
        details: dict[str, Any] | None = None,
        source_ip: str | None = None,
    ) -> None:
        """Enqueue an audit entry. Never blocks and never raises."""
        if not self._enabled:
            return

        try:
            entry = AuditLogEntry(
                user_id=actor_id,
                action=action.value if isinstance(action, AuditAction) else action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=sanitize_details(details or {}),
                ip_address=source_ip,
                timestamp=datetime.now(),
            )
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            logger.warning(
                "audit_entry_dropped",
                reason="queue_full",
                action=str(action),
                entity_id=entity_id,
            )
        except Exception:
            logger.error("audit_record_failed", action=str(action), exc_info=True)

    async def drain(self) -> None:
        """Wait until every queued entry has been persisted."""
        if self._worker is not None and not self._worker.done():
            await self._queue.join()
            return

        while not self._queue.empty():
            entry = self._queue.get_nowait()
            try:
                await self._persist(entry)
            finally:
                self._queue.task_done()

    async def query(
        self,
        user_id: str | None = None,
        action: str | None = None,
        entity_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """List audit entries, newest first."""
        return await self._store.query(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )

    async def _run(self) -> None:
        while True:
            entry = await self._queue.get()
            try:
                await self._persist(entry)
            finally:
                self._queue.task_done()

    async def _persist(self, entry: AuditLogEntry) -> None:
        try:
            await self._store.append(entry)
        except Exception:
            logger.error(
                "audit_record_failed",
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                exc_info=True,
            )
