"""Tests for the SQLite connection pool."""

from pathlib import Path

import pytest

from pharmastock.infrastructure.storage.sqlite.connection import ConnectionPool


@pytest.fixture
async def pool(temp_db_path: Path):
    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=1000)
    try:
        yield pool
    finally:
        await pool.close()


class TestConnectionPool:
    async def test_initialize_creates_parent_directory(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "nested" / "stock.db", pool_size=1)
        await pool.initialize()
        try:
            assert (tmp_path / "nested").is_dir()
            assert pool.opened_count == 1
        finally:
            await pool.close()

    async def test_pragmas(self, pool):
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"

    async def test_connection_returned_after_use(self, pool):
        async with pool.acquire():
            assert pool.idle_count == 1
        assert pool.idle_count == 2

    async def test_transaction_commits(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1

    async def test_transaction_rolls_back_on_error(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0

    async def test_close_resets(self, pool):
        await pool.initialize()
        await pool.close()

        assert pool.ready is False
        assert pool.opened_count == 0
