"""Core domain entities."""

from pharmastock.core.entities.audit import Actor, AuditAction, AuditLogEntry
from pharmastock.core.entities.medicine import (
    ExpiryMonth,
    Medicine,
    MedicinePatch,
    MedicineStatus,
    PrescriptionStatus,
    StorageLocation,
    utcnow,
)
from pharmastock.core.entities.sale import (
    CartLine,
    DailySales,
    SaleRecord,
    SaleResult,
    SalesTotals,
    TopSeller,
)

__all__ = [
    # Medicine
    "Medicine",
    "MedicinePatch",
    "ExpiryMonth",
    "MedicineStatus",
    "PrescriptionStatus",
    "StorageLocation",
    "utcnow",
    # Sales
    "CartLine",
    "SaleRecord",
    "SaleResult",
    "SalesTotals",
    "DailySales",
    "TopSeller",
    # Audit
    "Actor",
    "AuditAction",
    "AuditLogEntry",
]
