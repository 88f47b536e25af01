"""Medicine domain entities."""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from pharmastock.core.exceptions import ValidationError


def utcnow() -> datetime:
    """Naive UTC timestamp, the form persisted by the stores."""
    return datetime.now(UTC).replace(tzinfo=None)


class MedicineStatus(str, Enum):
    """Stock-health status derived from quantities, threshold and expiry."""

    AVAILABLE = "available"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"
    EXPIRED = "expired"


class PrescriptionStatus(str, Enum):
    """Dispensing category."""

    PRESCRIPTION = "Prescription"
    OTC = "OTC"
    CONTROLLED = "Controlled"


class StorageLocation(str, Enum):
    """Physical shelf or room the bulk stock lives in."""

    SHELF_A = "Pharmacy Shelf A"
    SHELF_B = "Pharmacy Shelf B"
    REFRIGERATOR = "Refrigerator"
    CONTROLLED_STORAGE = "Controlled Storage"
    STORE_ROOM = "Store Room"
    DISPENSER = "Dispenser"
    OTHER = "Other"


class Medicine(BaseModel):
    """
    A medicine batch tracked across the store and dispenser pools.

    ``status`` is never set by callers; use cases recompute it with
    ``derive_status`` whenever quantities, threshold or expiry change.
    """

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: int | None = None

    brand_name: str = Field(..., min_length=1)
    generic_name: str = Field(..., min_length=1)
    dosage_form: str = Field(..., min_length=1)
    strength: str = Field(..., min_length=1)
    unit_type: str = Field(..., min_length=1)
    batch_number: str = Field(..., min_length=1)

    store_quantity: int = Field(default=0, ge=0)
    dispenser_quantity: int = Field(default=0, ge=0)
    sub_unit_quantity: int | None = Field(default=None, gt=0)

    purchase_cost: float = Field(default=0.0, ge=0)
    selling_price: float = Field(..., ge=0)

    reorder_threshold: int = Field(default=10, ge=0)
    reorder_quantity: int | None = Field(default=None, ge=0)

    expiry_date: date
    received_date: date

    prescription_status: PrescriptionStatus
    storage_location: StorageLocation | None = None
    storage_conditions: str | None = None
    supplier_info: str | None = None
    notes: str | None = None
    image_url: str | None = None

    status: MedicineStatus = MedicineStatus.AVAILABLE
    is_deleted: bool = False
    version: int = 0  # bumped by the store on every write

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def total_quantity(self) -> int:
        """Store plus dispenser stock."""
        return self.store_quantity + self.dispenser_quantity

    @property
    def store_reorder_needed(self) -> bool:
        """Store-side reorder signal: bulk stock alone is under the threshold."""
        return self.store_quantity < self.reorder_threshold

    @property
    def identity(self) -> tuple[str, str, str]:
        """Natural key: (brand_name, strength, batch_number)."""
        return (self.brand_name, self.strength, self.batch_number)


class MedicinePatch(BaseModel):
    """
    Partial update for a medicine.

    Only fields explicitly present in the payload are applied; anything left
    unset keeps its stored value. Quantities in the dispenser, status, and
    soft-delete state are not patchable.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    brand_name: str | None = Field(default=None, min_length=1)
    generic_name: str | None = Field(default=None, min_length=1)
    dosage_form: str | None = Field(default=None, min_length=1)
    strength: str | None = Field(default=None, min_length=1)
    unit_type: str | None = Field(default=None, min_length=1)
    batch_number: str | None = Field(default=None, min_length=1)

    store_quantity: int | None = Field(default=None, ge=0)
    sub_unit_quantity: int | None = Field(default=None, gt=0)

    purchase_cost: float | None = Field(default=None, ge=0)
    selling_price: float | None = Field(default=None, ge=0)

    reorder_threshold: int | None = Field(default=None, ge=0)
    reorder_quantity: int | None = Field(default=None, ge=0)

    expiry_date: date | None = None
    received_date: date | None = None

    prescription_status: PrescriptionStatus | None = None
    storage_location: StorageLocation | None = None
    storage_conditions: str | None = None
    supplier_info: str | None = None
    notes: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)

    def touches_identity(self, medicine: Medicine) -> bool:
        """True when brand, strength or batch would change."""
        changes = self.changes()
        return any(
            key in changes and changes[key] != getattr(medicine, key)
            for key in ("brand_name", "strength", "batch_number")
        )

    def apply_to(self, medicine: Medicine) -> Medicine:
        """Return a validated copy of ``medicine`` with the patch merged in."""
        merged = {**medicine.model_dump(), **self.changes()}
        try:
            return Medicine.model_validate(merged)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "patch"
            raise ValidationError(field, first["msg"], first.get("input")) from e


class ExpiryMonth(BaseModel):
    """Live medicines whose expiry falls in one calendar month."""

    month: date = Field(..., description="First day of the month")
    count: int = Field(default=0, ge=0)
