"""Store service routers package."""

from services.store_service.routers.admin_catalog import router as admin_catalog_router
from services.store_service.routers.admin_entities import router as admin_entities_router
from services.store_service.routers.admin_orders import router as admin_orders_router
from services.store_service.routers.admin_reports import router as admin_reports_router
from services.store_service.routers.admin_wizard import router as admin_wizard_router
from services.store_service.routers.cart import router as cart_router
from services.store_service.routers.catalog import router as catalog_router
from services.store_service.routers.orders import router as orders_router
from services.store_service.routers.users import router as users_router

__all__ = [
    "admin_catalog_router",
    "admin_entities_router",
    "admin_orders_router",
    "admin_reports_router",
    "admin_wizard_router",
    "cart_router",
    "catalog_router",
    "orders_router",
    "users_router",
]
