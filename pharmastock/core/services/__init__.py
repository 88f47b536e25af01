"""Core domain services."""

from pharmastock.core.services.expiry import (
    ExpiryWindow,
    SalesRange,
    add_months,
    expiry_window_bounds,
    sales_range_bounds,
)
from pharmastock.core.services.sale_planner import (
    PlannedSale,
    SalePlan,
    is_positive_quantity,
    plan_sales,
)
from pharmastock.core.services.stock_status import derive_status, status_for

__all__ = [
    "derive_status",
    "status_for",
    "ExpiryWindow",
    "SalesRange",
    "add_months",
    "expiry_window_bounds",
    "sales_range_bounds",
    "PlannedSale",
    "SalePlan",
    "is_positive_quantity",
    "plan_sales",
]
