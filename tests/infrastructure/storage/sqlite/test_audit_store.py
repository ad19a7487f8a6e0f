"""Tests for SQLite audit store."""

from datetime import datetime

from src.core.entities import AuditLogEntry
from src.infrastructure.storage.sqlite.audit_store import SQLiteAuditStore


def entry(action, user_id="u1", entity_type="Sale", timestamp=None, **kwargs):
    return AuditLogEntry(
        action=action,
        user_id=user_id,
        entity_type=entity_type,
        timestamp=timestamp or datetime(2025, 3, 14, 10, 0),
        **kwargs,
    )


class TestAuditStore:
    async def test_append_assigns_id(self, audit_store: SQLiteAuditStore):
        stored = await audit_store.append(
            entry("SALE_CREATE", entity_id="s1", details={"total": "201.60"}, ip_address="10.0.0.1")
        )

        assert stored.id is not None
        [loaded] = await audit_store.query()
        assert loaded.details == {"total": "201.60"}
        assert loaded.ip_address == "10.0.0.1"
        assert loaded.entity_id == "s1"

    async def test_query_filters_newest_first(self, audit_store: SQLiteAuditStore):
        await audit_store.append(entry("SALE_CREATE", timestamp=datetime(2025, 3, 1)))
        await audit_store.append(
            entry("MEDICINE_CREATE", entity_type="Medicine", timestamp=datetime(2025, 3, 2))
        )
        await audit_store.append(
            entry("SALE_CREATE", user_id="u2", timestamp=datetime(2025, 3, 3))
        )

        sales = await audit_store.query(action="SALE_CREATE")
        assert [e.user_id for e in sales] == ["u2", "u1"]

        assert [e.action for e in await audit_store.query(entity_type="Medicine")] == [
            "MEDICINE_CREATE"
        ]
        assert len(await audit_store.query(user_id="u1")) == 2

        ranged = await audit_store.query(
            start=datetime(2025, 3, 2), end=datetime(2025, 3, 2, 23, 59)
        )
        assert [e.action for e in ranged] == ["MEDICINE_CREATE"]

        page = await audit_store.query(limit=1, offset=1)
        assert [e.action for e in page] == ["MEDICINE_CREATE"]
