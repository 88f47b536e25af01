"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from pharmastock.core.entities.medicine import MedicinePatch, MedicineStatus, StorageLocation
from pharmastock.core.services.expiry import ExpiryWindow, SalesRange


class CreateMedicineRequest(BaseModel):
    """Request for adding a medicine batch to the catalog.

    The image travels separately as a multipart file; this model is the JSON
    ``payload`` field of the same form.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    brand_name: str = Field(..., min_length=1, description="Brand name", examples=["Panadol"])
    generic_name: str = Field(
        ..., min_length=1, description="Generic name", examples=["Paracetamol"]
    )
    dosage_form: str = Field(..., min_length=1, description="Dosage form", examples=["Tablet"])
    strength: str = Field(..., min_length=1, description="Strength", examples=["500mg"])
    unit_type: str = Field(..., min_length=1, description="Unit of sale", examples=["Box"])
    batch_number: str = Field(..., min_length=1, description="Manufacturer batch number")

    store_quantity: int = Field(default=0, ge=0, description="Initial bulk stock")
    sub_unit_quantity: int | None = Field(
        default=None, gt=0, description="Sub-units per unit (e.g. tablets per box)"
    )

    purchase_cost: float = Field(default=0.0, ge=0, description="Cost per unit")
    selling_price: float = Field(..., ge=0, description="Price per unit")

    reorder_threshold: int | None = Field(
        default=None, ge=0, description="Total-stock floor for low-stock status"
    )
    reorder_quantity: int | None = Field(default=None, ge=0, description="Suggested reorder size")

    expiry_date: date = Field(..., description="Batch expiry date")
    received_date: date = Field(..., description="Date the batch was received")

    prescription_status: str = Field(
        ...,
        description="Prescription, OTC or Controlled",
        examples=["OTC"],
    )
    storage_location: StorageLocation | None = Field(default=None, description="Shelf or room")
    storage_conditions: str | None = Field(default=None, description="e.g. Store below 25C")
    supplier_info: str | None = Field(default=None, description="Supplier name or contact")
    notes: str | None = Field(default=None, description="Free-form notes")


class UpdateMedicineRequest(MedicinePatch):
    """Partial update; only fields present in the payload are applied."""

    pass


class TransferStockRequest(BaseModel):
    """Move units from the store to the dispenser."""

    quantity: int = Field(..., description="Units to move; must be positive")


class SaleItemRequest(BaseModel):
    """One cart line."""

    medicine_id: int = Field(..., description="Medicine to sell")
    quantity: int = Field(..., description="Units to sell; must be positive")


class SellRequest(BaseModel):
    """Sell one or more cart lines all-or-nothing."""

    items: list[SaleItemRequest] = Field(
        ...,
        description="Cart lines, applied in order",
        examples=[[{"medicine_id": 1, "quantity": 2}]],
    )


class ListMedicinesRequest(BaseModel):
    """Catalog listing filters, sort and page."""

    search: str | None = Field(
        default=None, description="Substring over brand, generic name and batch"
    )
    status: MedicineStatus | None = Field(default=None, description="Exact status filter")
    expiry: ExpiryWindow | None = Field(
        default=None, description="Only medicines expiring within this window"
    )
    sort_by: str = Field(default="expiry_date", description="Sort field")
    order: str = Field(default="desc", description="asc or desc")
    page: int = Field(default=1, description="1-based page number")
    limit: int | None = Field(default=None, description="Page size")


class ListSalesRequest(BaseModel):
    """Sales history filters."""

    range: SalesRange | None = Field(
        default=None, description="Named look-back range (default Last 30 Days)"
    )
    medicine_id: int | None = Field(default=None, description="Only sales of this medicine")
    page: int = Field(default=1, description="1-based page number")
    limit: int | None = Field(default=None, description="Page size")
