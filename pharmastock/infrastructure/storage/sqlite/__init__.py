"""SQLite storage implementations."""

from pharmastock.infrastructure.storage.sqlite.audit_log_store import SQLiteAuditLogStore
from pharmastock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from pharmastock.infrastructure.storage.sqlite.medicine_store import SQLiteMedicineStore
from pharmastock.infrastructure.storage.sqlite.sale_store import SQLiteSaleStore

# Singleton instances
_medicine_store: SQLiteMedicineStore | None = None
_sale_store: SQLiteSaleStore | None = None
_audit_log_store: SQLiteAuditLogStore | None = None


async def get_medicine_store() -> SQLiteMedicineStore:
    """Get singleton medicine store instance."""
    global _medicine_store
    if _medicine_store is None:
        _medicine_store = SQLiteMedicineStore()
    return _medicine_store


async def get_sale_store() -> SQLiteSaleStore:
    """Get singleton sale store instance."""
    global _sale_store
    if _sale_store is None:
        _sale_store = SQLiteSaleStore()
    return _sale_store


async def get_audit_log_store() -> SQLiteAuditLogStore:
    """Get singleton audit log store instance."""
    global _audit_log_store
    if _audit_log_store is None:
        _audit_log_store = SQLiteAuditLogStore()
    return _audit_log_store


__all__ = [
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "SQLiteMedicineStore",
    "SQLiteSaleStore",
    "SQLiteAuditLogStore",
    "get_medicine_store",
    "get_sale_store",
    "get_audit_log_store",
]
