"""Audit trail and actor entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from pharmastock.core.entities.medicine import utcnow


class AuditAction(str, Enum):
    """Kinds of actions written to the audit trail."""

    ADD = "Add"
    EDIT = "Edit"
    DELETE = "Delete"
    SELL = "Sell"
    TRANSFER = "Transfer"


class Actor(BaseModel):
    """Already-authenticated user performing an operation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class AuditLogEntry(BaseModel):
    """One row of the audit trail."""

    id: int | None = None
    actor_id: str
    actor_name: str
    action: AuditAction
    details: str
    timestamp: datetime = Field(default_factory=utcnow)
