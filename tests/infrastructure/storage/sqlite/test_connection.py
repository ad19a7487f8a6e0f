"""Unit tests for the SQLite connection pool and ambient transactions."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


async def _sequence(conn, day_key: str):
    cursor = await conn.execute(
        "SELECT last_seq FROM invoice_sequences WHERE day_key = ?", (day_key,)
    )
    row = await cursor.fetchone()
    return row["last_seq"] if row else None


class TestConnectionPool:
    """Tests for ConnectionPool lifecycle."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False

    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "rx.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        try:
            assert db_path.parent.exists()
            assert len(pool._connections) == 1
        finally:
            await pool.close()

    async def test_connection_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1, busy_timeout=1234)
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA journal_mode")
                assert (await cursor.fetchone())[0] == "wal"
                cursor = await conn.execute("PRAGMA foreign_keys")
                assert (await cursor.fetchone())[0] == 1
                cursor = await conn.execute("PRAGMA busy_timeout")
                assert (await cursor.fetchone())[0] == 1234
        finally:
            await pool.close()

    async def test_acquire_blocks_when_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            async with pool.acquire():
                with pytest.raises(asyncio.TimeoutError):
                    async with asyncio.timeout(0.1):
                        async with pool.acquire():
                            pass
            assert pool._pool.qsize() == 1
        finally:
            await pool.close()

    async def test_close_resets(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.close()
        assert pool._connections == []
        assert pool._initialized is False


class TestGlobalPool:
    async def test_get_pool_uses_settings(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                pool = await get_pool()
                assert pool.db_path == mock_settings.storage.db_path
                assert pool.pool_size == 3
                assert await get_pool() is pool
            finally:
                await close_pool()
        assert conn_module._pool is None

    async def test_close_pool_when_none(self):
        conn_module._pool = None
        await close_pool()


class TestTransactions:
    async def test_commit_on_success(self, db):
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT INTO invoice_sequences (day_key, last_seq) VALUES ('2025-01-01', 4)"
            )

        async with get_connection() as conn:
            assert await _sequence(conn, "2025-01-01") == 4

    async def test_rollback_on_exception(self, db):
        with pytest.raises(RuntimeError):
            async with get_transaction() as conn:
                await conn.execute(
                    "INSERT INTO invoice_sequences (day_key, last_seq) VALUES ('2025-01-02', 1)"
                )
                raise RuntimeError("boom")

        async with get_connection() as conn:
            assert await _sequence(conn, "2025-01-02") is None

    async def test_nested_transaction_joins_outer(self, db):
        async with get_transaction() as outer:
            async with get_transaction() as inner:
                assert inner is outer
            async with get_connection() as reader:
                assert reader is outer

    async def test_inner_failure_rolls_back_outer_work(self, db):
        with pytest.raises(ValueError):
            async with get_transaction() as conn:
                await conn.execute(
                    "INSERT INTO invoice_sequences (day_key, last_seq) VALUES ('2025-01-03', 1)"
                )
                async with get_transaction() as inner:
                    await inner.execute(
                        "INSERT INTO invoice_sequences (day_key, last_seq) "
                        "VALUES ('2025-01-04', 1)"
                    )
                    raise ValueError("inner")

        async with get_connection() as conn:
            assert await _sequence(conn, "2025-01-03") is None
            assert await _sequence(conn, "2025-01-04") is None

    async def test_reads_inside_transaction_see_uncommitted_writes(self, db):
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT INTO invoice_sequences (day_key, last_seq) VALUES ('2025-01-05', 9)"
            )
            async with get_connection() as reader:
                assert await _sequence(reader, "2025-01-05") == 9
