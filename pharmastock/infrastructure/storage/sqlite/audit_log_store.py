"""SQLite implementation of the audit trail."""

from datetime import datetime

import aiosqlite

from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction, AuditLogEntry
from pharmastock.core.entities.medicine import utcnow
from pharmastock.core.interfaces.audit_sink import IAuditLogStore
from pharmastock.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


class SQLiteAuditLogStore(IAuditLogStore):
    """Append-only audit log backed by SQLite."""

    async def record(self, actor: Actor, action: AuditAction, details: str) -> AuditLogEntry:
        entry = AuditLogEntry(
            actor_id=actor.id,
            actor_name=actor.name,
            action=action,
            details=details,
        )
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO audit_logs (actor_id, actor_name, action, details, timestamp)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.actor_id,
                    entry.actor_name,
                    entry.action.value,
                    entry.details,
                    entry.timestamp.isoformat(),
                ),
            )
            entry.id = cursor.lastrowid

        logger.debug("audit_recorded", audit_id=entry.id, action=action.value, actor_id=actor.id)
        return entry

    async def list_recent(self, limit: int = 250) -> list[AuditLogEntry]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM audit_logs ORDER BY timestamp DESC, id DESC LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> AuditLogEntry:
        try:
            timestamp = datetime.fromisoformat(row["timestamp"])
        except (ValueError, TypeError):
            timestamp = utcnow()
        return AuditLogEntry(
            id=row["id"],
            actor_id=row["actor_id"],
            actor_name=row["actor_name"],
            action=AuditAction(row["action"]),
            details=row["details"],
            timestamp=timestamp,
        )
