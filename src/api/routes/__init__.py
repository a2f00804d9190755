"""API route modules."""

from src.api.routes.bills import router as bills_router
from src.api.routes.customers import router as customers_router
from src.api.routes.health import router as health_router
from src.api.routes.products import router as products_router
from src.api.routes.sessions import router as sessions_router

__all__ = [
    "health_router",
    "customers_router",
    "products_router",
    "sessions_router",
    "bills_router",
]
