"""Data transfer objects."""

from pharmastock.application.dto.requests import (
    CreateMedicineRequest,
    ListMedicinesRequest,
    ListSalesRequest,
    SaleItemRequest,
    SellRequest,
    TransferStockRequest,
    UpdateMedicineRequest,
)
from pharmastock.application.dto.responses import (
    AuditLogListResponse,
    AuditLogResponse,
    DeleteMedicineResponse,
    ErrorResponse,
    HealthResponse,
    InventoryOverviewResponse,
    MedicineListResponse,
    MedicineResponse,
    SaleListResponse,
    SaleRecordResponse,
    SaleResultResponse,
    SellResponse,
    TopSellerResponse,
    TransferStockResponse,
)

__all__ = [
    # Requests
    "CreateMedicineRequest",
    "UpdateMedicineRequest",
    "TransferStockRequest",
    "SaleItemRequest",
    "SellRequest",
    "ListMedicinesRequest",
    "ListSalesRequest",
    # Responses
    "MedicineResponse",
    "MedicineListResponse",
    "DeleteMedicineResponse",
    "TransferStockResponse",
    "SaleResultResponse",
    "SellResponse",
    "SaleRecordResponse",
    "SaleListResponse",
    "TopSellerResponse",
    "InventoryOverviewResponse",
    "AuditLogResponse",
    "AuditLogListResponse",
    "HealthResponse",
    "ErrorResponse",
]
