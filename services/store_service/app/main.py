"""FastAPI application for the Store Service."""

from datetime import timedelta

from fastapi import FastAPI
from libs.common.config import get_settings
from libs.common.middleware import add_observability_middleware
from services.store_service.routers import (
    admin_catalog_router,
    admin_entities_router,
    admin_orders_router,
    admin_reports_router,
    admin_wizard_router,
    cart_router,
    catalog_router,
    orders_router,
    users_router,
)
from services.store_service.services.product_wizard import ProductWizardRegistry


def create_app() -> FastAPI:
    """Create and configure the Store Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Mini-App Store Service",
        version="0.1.0",
        description="Order management for the Telegram mini-app shop - catalog, cart, checkout, loyalty, admin.",
    )
    add_observability_middleware(app)

    app.state.wizard_registry = ProductWizardRegistry(
        ttl=timedelta(minutes=settings.WIZARD_SESSION_TTL_MINUTES)
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "store"}

    # Mini-app routes (registration, catalog, cart, checkout, order history)
    app.include_router(users_router, prefix="/api")
    app.include_router(catalog_router, prefix="/api")
    app.include_router(cart_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")

    # Admin routes (catalog, orders, reports, entity manager, product wizard)
    app.include_router(admin_catalog_router, prefix="/api/admin")
    app.include_router(admin_orders_router, prefix="/api/admin")
    app.include_router(admin_reports_router, prefix="/api/admin")
    app.include_router(admin_entities_router, prefix="/api/admin")
    app.include_router(admin_wizard_router, prefix="/api/admin")

    return app


app = create_app()
