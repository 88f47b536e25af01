"""List Audit Logs Use Case."""

from pharmastock.application.dto.responses import AuditLogListResponse, AuditLogResponse
from pharmastock.config import get_settings
from pharmastock.core.entities.audit import AuditLogEntry
from pharmastock.core.exceptions import ValidationError
from pharmastock.core.interfaces.audit_sink import IAuditLogStore


class ListAuditLogsUseCase:
    """Most recent audit entries, newest first."""

    def __init__(self, audit_log_store: IAuditLogStore | None = None):
        self._audit_log_store = audit_log_store

    async def _get_audit_log_store(self) -> IAuditLogStore:
        if self._audit_log_store is None:
            from pharmastock.infrastructure.storage.sqlite import get_audit_log_store

            self._audit_log_store = await get_audit_log_store()
        return self._audit_log_store

    async def execute(self, limit: int | None = None) -> list[AuditLogEntry]:
        max_limit = get_settings().inventory.audit_log_limit
        if limit is None:
            limit = max_limit
        if not 1 <= limit <= max_limit:
            raise ValidationError("limit", f"Limit must be between 1 and {max_limit}", limit)

        store = await self._get_audit_log_store()
        return await store.list_recent(limit=limit)

    def to_response(self, entries: list[AuditLogEntry]) -> AuditLogListResponse:
        return AuditLogListResponse(
            items=[AuditLogResponse.from_entity(e) for e in entries],
            total=len(entries),
        )
