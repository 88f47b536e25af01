"""
Dependency injection container for FastAPI.

Provides use case instances and the acting user to route handlers.
"""

from functools import lru_cache

from fastapi import Header, HTTPException, status

from pharmastock.application.use_cases import (
    CreateMedicineUseCase,
    DeleteMedicineUseCase,
    GetMedicineUseCase,
    GetSaleUseCase,
    InventoryOverviewUseCase,
    ListAuditLogsUseCase,
    ListMedicinesUseCase,
    ListSalesUseCase,
    SalesReportUseCase,
    SellCartUseCase,
    SellMedicineUseCase,
    TransferStockUseCase,
    UpdateMedicineUseCase,
)
from pharmastock.config import Settings, get_settings
from pharmastock.core.entities.audit import Actor


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


async def get_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_name: str | None = Header(default=None),
) -> Actor:
    """
    Resolve the acting user from request headers.

    Authentication happens upstream; this only requires that an identity
    was forwarded. The display name falls back to the ID.
    """
    actor_id = (x_actor_id or "").strip()
    if not actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Actor-Id header",
        )
    actor_name = (x_actor_name or "").strip() or actor_id
    return Actor(id=actor_id, name=actor_name)


# Catalog use case dependencies
def get_create_medicine_use_case() -> CreateMedicineUseCase:
    return CreateMedicineUseCase()


def get_get_medicine_use_case() -> GetMedicineUseCase:
    return GetMedicineUseCase()


def get_update_medicine_use_case() -> UpdateMedicineUseCase:
    return UpdateMedicineUseCase()


def get_delete_medicine_use_case() -> DeleteMedicineUseCase:
    return DeleteMedicineUseCase()


def get_list_medicines_use_case() -> ListMedicinesUseCase:
    return ListMedicinesUseCase()


# Stock and sale use case dependencies
def get_transfer_stock_use_case() -> TransferStockUseCase:
    """Get transfer stock use case."""
    return TransferStockUseCase()


def get_sell_medicine_use_case() -> SellMedicineUseCase:
    """Get single-line sale use case."""
    return SellMedicineUseCase()


def get_sell_cart_use_case() -> SellCartUseCase:
    """Get cart sale use case."""
    return SellCartUseCase()


def get_list_sales_use_case() -> ListSalesUseCase:
    return ListSalesUseCase()


def get_get_sale_use_case() -> GetSaleUseCase:
    return GetSaleUseCase()


# Reporting use case dependencies
def get_inventory_overview_use_case() -> InventoryOverviewUseCase:
    return InventoryOverviewUseCase()


def get_sales_report_use_case() -> SalesReportUseCase:
    return SalesReportUseCase()


def get_list_audit_logs_use_case() -> ListAuditLogsUseCase:
    return ListAuditLogsUseCase()
