"""API route modules."""

from src.api.routes.audit import router as audit_router
from src.api.routes.batches import router as batches_router
from src.api.routes.health import router as health_router
from src.api.routes.inventory import router as inventory_router
from src.api.routes.medicines import router as medicines_router
from src.api.routes.prescriptions import router as prescriptions_router
from src.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "sales_router",
    "prescriptions_router",
    "medicines_router",
    "batches_router",
    "inventory_router",
    "audit_router",
]
