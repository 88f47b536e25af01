"""Application use cases."""

from pharmastock.application.use_cases.create_medicine import CreateMedicineUseCase
from pharmastock.application.use_cases.delete_medicine import DeleteMedicineUseCase
from pharmastock.application.use_cases.get_medicine import GetMedicineUseCase
from pharmastock.application.use_cases.get_sale import GetSaleUseCase
from pharmastock.application.use_cases.inventory_overview import (
    InventoryOverview,
    InventoryOverviewUseCase,
)
from pharmastock.application.use_cases.list_audit_logs import ListAuditLogsUseCase
from pharmastock.application.use_cases.list_medicines import ListMedicinesUseCase, MedicinePage
from pharmastock.application.use_cases.list_sales import ListSalesUseCase, SalePage
from pharmastock.application.use_cases.sales_report import SalesReport, SalesReportUseCase
from pharmastock.application.use_cases.sell_cart import SellCartUseCase
from pharmastock.application.use_cases.sell_medicine import SellMedicineUseCase
from pharmastock.application.use_cases.transfer_stock import TransferResult, TransferStockUseCase
from pharmastock.application.use_cases.update_medicine import UpdateMedicineUseCase

__all__ = [
    # Catalog
    "CreateMedicineUseCase",
    "GetMedicineUseCase",
    "UpdateMedicineUseCase",
    "DeleteMedicineUseCase",
    "ListMedicinesUseCase",
    "MedicinePage",
    # Stock and sales
    "TransferStockUseCase",
    "TransferResult",
    "SellMedicineUseCase",
    "SellCartUseCase",
    "ListSalesUseCase",
    "SalePage",
    "GetSaleUseCase",
    # Reporting
    "InventoryOverviewUseCase",
    "InventoryOverview",
    "SalesReportUseCase",
    "SalesReport",
    "ListAuditLogsUseCase",
]
