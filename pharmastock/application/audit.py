"""Post-commit audit recording for use cases."""

from pharmastock.config import get_logger
from pharmastock.core.entities.audit import Actor, AuditAction, AuditLogEntry
from pharmastock.core.interfaces.audit_sink import IAuditSink

logger = get_logger(__name__)


class AuditRecorder:
    """
    Writes audit entries after an operation has committed.

    The operation's outcome never depends on the audit trail: sink failures
    are logged and dropped.
    """

    def __init__(self, audit_sink: IAuditSink | None = None):
        self._audit_sink = audit_sink

    async def _get_audit_sink(self) -> IAuditSink:
        if self._audit_sink is None:
            from pharmastock.infrastructure.storage.sqlite import get_audit_log_store

            self._audit_sink = await get_audit_log_store()
        return self._audit_sink

    async def record(
        self, actor: Actor, action: AuditAction, details: str
    ) -> AuditLogEntry | None:
        try:
            sink = await self._get_audit_sink()
            return await sink.record(actor, action, details)
        except Exception as e:
            logger.warning(
                "audit_log_failed",
                action=action.value,
                actor_id=actor.id,
                details=details,
                error=str(e),
            )
            return None
