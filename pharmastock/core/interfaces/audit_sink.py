"""Abstract interfaces for the audit trail."""

from abc import ABC, abstractmethod

from pharmastock.core.entities.audit import Actor, AuditAction, AuditLogEntry


class IAuditSink(ABC):
    """Write side of the audit trail."""

    @abstractmethod
    async def record(self, actor: Actor, action: AuditAction, details: str) -> AuditLogEntry:
        """Append an audit entry."""
        pass


class IAuditLogStore(IAuditSink):
    """Audit sink that can also be read back."""

    @abstractmethod
    async def list_recent(self, limit: int = 250) -> list[AuditLogEntry]:
        """Most recent entries first."""
        pass
