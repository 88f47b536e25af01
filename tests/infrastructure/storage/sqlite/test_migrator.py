"""Unit tests for database migrator."""

from pathlib import Path

import aiosqlite
import pytest

from pharmastock.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v002_add_supplier_index.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "002"
        assert info.name == "add_supplier_index"
        assert len(info.checksum) == 16

    def test_from_file_invalid_filename_raises(self, tmp_path: Path):
        invalid_file = tmp_path / "initial.sql"
        invalid_file.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(invalid_file)


def test_discover_migrations_in_order():
    versions = [m.version for m in discover_migrations()]
    assert versions[0] == "001"
    assert versions == sorted(versions)


class TestInitializeDatabase:
    async def test_creates_schema(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.success for r in results] == [True]
        async with aiosqlite.connect(temp_db_path) as conn:
            applied = await get_applied_migrations(conn)
        assert "001" in applied

    async def test_idempotent(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        second = await initialize_database(temp_db_path, create_backup_before=False)

        assert second == []

    async def test_backup_removed_after_success(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        await initialize_database(temp_db_path, create_backup_before=True)

        assert list(temp_db_path.parent.glob("*.backup_*")) == []


class TestBackup:
    def test_create_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "stock.db"
        db_path.write_bytes(b"original")

        backup = create_backup(db_path)
        db_path.write_bytes(b"changed")
        restore_backup(db_path, backup)

        assert db_path.read_bytes() == b"original"


class TestVerifySchemaIntegrity:
    async def test_all_checks_pass(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)

        checks = await verify_schema_integrity(temp_db_path)

        assert {c["check"] for c in checks} == {"foreign_keys", "integrity", "required_tables"}
        assert all(c["status"] == "PASS" for c in checks)

    async def test_missing_tables_fail(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute("CREATE TABLE unrelated (id INTEGER)")
            await conn.commit()

        checks = await verify_schema_integrity(temp_db_path)

        required = next(c for c in checks if c["check"] == "required_tables")
        assert required["status"] == "FAIL"
