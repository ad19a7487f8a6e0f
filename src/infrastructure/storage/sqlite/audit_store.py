"""SQLite implementation of audit log storage."""

import json
from datetime import datetime

import aiosqlite

from src.core.entities.audit import AuditLogEntry
from src.core.interfaces.audit_store import IAuditStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction


class SQLiteAuditStore(IAuditStore):
    """SQLite implementation of the append-only audit log."""

    async def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        """Append an entry to the audit log."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO audit_logs (
                    user_id, action, entity_type, entity_id,
                    details, ip_address, timestamp
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.user_id,
                    entry.action,
                    entry.entity_type,
                    entry.entity_id,
                    json.dumps(entry.details, default=str),
                    entry.ip_address,
                    entry.timestamp.isoformat(),
                ),
            )
            entry.id = cursor.lastrowid
        return entry

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
        clauses = []
        params: list = []
        if user_id:
            clauses.append("user_id = ?")
            params.append(user_id)
        if action:
            clauses.append("action = ?")
            params.append(action)
        if entity_type:
            clauses.append("entity_type = ?")
            params.append(entity_type)
        if start:
            clauses.append("timestamp >= ?")
            params.append(start.isoformat())
        if end:
            clauses.append("timestamp <= ?")
            params.append(end.isoformat())

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM audit_logs
                {where}
                ORDER BY timestamp DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(r) for r in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> AuditLogEntry:
        """Convert a database row to an AuditLogEntry."""
        return AuditLogEntry(
            id=row["id"],
            user_id=row["user_id"],
            action=row["action"],
            entity_type=row["entity_type"],
            entity_id=row["entity_id"],
            details=json.loads(row["details"] or "{}"),
            ip_address=row["ip_address"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )
