"""API route modules."""

from pharmastock.api.routes.audit_logs import router as audit_logs_router
from pharmastock.api.routes.health import router as health_router
from pharmastock.api.routes.medicines import router as medicines_router
from pharmastock.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "medicines_router",
    "sales_router",
    "audit_logs_router",
]
