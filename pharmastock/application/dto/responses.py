"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from pharmastock.core.entities.audit import AuditLogEntry
from pharmastock.core.entities.medicine import Medicine, utcnow
from pharmastock.core.entities.sale import SaleRecord, SaleResult


class MedicineResponse(BaseModel):
    """Medicine response DTO."""

    id: int = Field(..., description="Medicine ID")
    brand_name: str
    generic_name: str
    dosage_form: str
    strength: str
    unit_type: str
    batch_number: str
    store_quantity: int = Field(..., description="Bulk stock")
    dispenser_quantity: int = Field(..., description="Stock available for sale")
    total_quantity: int = Field(..., description="Store plus dispenser")
    sub_unit_quantity: int | None = None
    purchase_cost: float
    selling_price: float
    reorder_threshold: int
    reorder_quantity: int | None = None
    expiry_date: date
    received_date: date
    prescription_status: str
    storage_location: str | None = None
    storage_conditions: str | None = None
    supplier_info: str | None = None
    notes: str | None = None
    image_url: str | None = None
    status: str = Field(..., description="available, low-stock, out-of-stock or expired")
    store_reorder_needed: bool = Field(
        ..., description="Store quantity alone is under the reorder threshold"
    )
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, medicine: Medicine) -> "MedicineResponse":
        return cls(
            id=medicine.id,  # type: ignore[arg-type]
            brand_name=medicine.brand_name,
            generic_name=medicine.generic_name,
            dosage_form=medicine.dosage_form,
            strength=medicine.strength,
            unit_type=medicine.unit_type,
            batch_number=medicine.batch_number,
            store_quantity=medicine.store_quantity,
            dispenser_quantity=medicine.dispenser_quantity,
            total_quantity=medicine.total_quantity,
            sub_unit_quantity=medicine.sub_unit_quantity,
            purchase_cost=medicine.purchase_cost,
            selling_price=medicine.selling_price,
            reorder_threshold=medicine.reorder_threshold,
            reorder_quantity=medicine.reorder_quantity,
            expiry_date=medicine.expiry_date,
            received_date=medicine.received_date,
            prescription_status=medicine.prescription_status.value,
            storage_location=(
                medicine.storage_location.value if medicine.storage_location else None
            ),
            storage_conditions=medicine.storage_conditions,
            supplier_info=medicine.supplier_info,
            notes=medicine.notes,
            image_url=medicine.image_url,
            status=medicine.status.value,
            store_reorder_needed=medicine.store_reorder_needed,
            version=medicine.version,
            created_at=medicine.created_at,
            updated_at=medicine.updated_at,
        )


class MedicineListResponse(BaseModel):
    """One page of the catalog."""

    items: list[MedicineResponse] = Field(default=[], description="Medicines on this page")
    total: int = Field(..., ge=0, description="Matches across all pages")
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)


class DeleteMedicineResponse(BaseModel):
    """Soft-delete acknowledgement."""

    id: int
    deleted: bool = True


class TransferStockResponse(BaseModel):
    """Result of a store to dispenser transfer."""

    medicine: MedicineResponse
    transferred: int = Field(..., description="Units moved")
    store_reorder_needed: bool = Field(
        ..., description="Store quantity alone is now under the reorder threshold"
    )


class SaleResultResponse(BaseModel):
    """One sold cart line."""

    sale_id: int | None = Field(default=None, description="Created sale record ID")
    medicine_id: int
    brand_name: str
    generic_name: str
    batch_number: str
    strength: str
    quantity_sold: int
    selling_price: float
    purchase_cost: float
    profit: float
    new_dispenser_stock: int
    status: str

    @classmethod
    def from_result(cls, result: SaleResult) -> "SaleResultResponse":
        return cls(**result.model_dump(exclude={"status"}), status=result.status.value)


class SellResponse(BaseModel):
    """Outcome of a sale, single line or cart."""

    results: list[SaleResultResponse] = Field(..., description="One entry per cart line")
    total_quantity: int = Field(..., description="Units sold across all lines")
    total_amount: float = Field(..., description="Revenue across all lines")
    total_profit: float = Field(..., description="Profit across all lines")


class SaleRecordResponse(BaseModel):
    """Sale ledger entry."""

    id: int
    medicine_id: int
    brand_name: str
    generic_name: str
    batch_number: str
    strength: str
    dosage_form: str
    unit_type: str
    quantity_sold: int
    selling_price: float
    purchase_cost: float
    profit: float
    stock_before: int
    stock_after: int
    sold_at: datetime

    @classmethod
    def from_entity(cls, record: SaleRecord) -> "SaleRecordResponse":
        return cls(**record.model_dump())


class SaleListResponse(BaseModel):
    """One page of sales history."""

    items: list[SaleRecordResponse] = Field(default=[])
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    range_start: datetime = Field(..., description="Start of the reported range")
    range_end: datetime = Field(..., description="End of the reported range")


class SalesTotalsResponse(BaseModel):
    units_sold: int = Field(..., description="Units sold")
    revenue: float = Field(..., description="Sum of quantity times selling price")
    profit: float


class DailySalesResponse(SalesTotalsResponse):
    day: date


class SalesReportResponse(BaseModel):
    """Sales KPIs, daily trend and sold lines for a reporting range."""

    range_start: datetime
    range_end: datetime
    totals: SalesTotalsResponse
    low_stock_count: int
    out_of_stock_count: int
    trend: list[DailySalesResponse] = Field(default=[], description="One entry per day with sales")
    lines: list[SaleRecordResponse] = Field(default=[], description="Sold lines, newest first")


class TopSellerResponse(BaseModel):
    medicine_id: int
    brand_name: str
    total_sold: int


class ExpiryMonthResponse(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    label: str = Field(..., description="Short month name")
    count: int


class InventoryOverviewResponse(BaseModel):
    """Dashboard read model."""

    total_medicines: int = Field(..., description="Live medicines")
    by_status: dict[str, int] = Field(..., description="Live medicines per status")
    expired_count: int
    low_stock_count: int
    out_of_stock_count: int
    top_sellers: list[TopSellerResponse] = Field(default=[], description="Top 5 by units sold")
    expiry_trend: list[ExpiryMonthResponse] = Field(
        default=[], description="Live medicines expiring in each of the next six months"
    )


class AuditLogResponse(BaseModel):
    """Audit trail entry."""

    id: int
    actor_id: str
    actor_name: str
    action: str
    details: str
    timestamp: datetime

    @classmethod
    def from_entity(cls, entry: AuditLogEntry) -> "AuditLogResponse":
        return cls(
            id=entry.id,  # type: ignore[arg-type]
            actor_id=entry.actor_id,
            actor_name=entry.actor_name,
            action=entry.action.value,
            details=entry.details,
            timestamp=entry.timestamp,
        )


class AuditLogListResponse(BaseModel):
    items: list[AuditLogResponse] = Field(default=[])
    total: int = Field(..., ge=0)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = Field(..., description="ok or error")


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MEDICINE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=utcnow)
