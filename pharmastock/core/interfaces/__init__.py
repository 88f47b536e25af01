"""Core interfaces for external collaborators and storage."""

from pharmastock.core.interfaces.audit_sink import IAuditLogStore, IAuditSink
from pharmastock.core.interfaces.image_store import IImageStore, ImageUpload
from pharmastock.core.interfaces.medicine_store import (
    SORTABLE_FIELDS,
    IMedicineStore,
    MedicineQuery,
)
from pharmastock.core.interfaces.sale_store import ISaleStore

__all__ = [
    "IMedicineStore",
    "MedicineQuery",
    "SORTABLE_FIELDS",
    "ISaleStore",
    "IAuditSink",
    "IAuditLogStore",
    "IImageStore",
    "ImageUpload",
]
