"""API route registration."""

from fastapi import FastAPI

from storefront_catalog.api.routes import admin, cart, catalogs, products, system


def include_api_routes(app: FastAPI) -> None:
    """Attach all API routers to the application."""

    app.include_router(system.router)
    app.include_router(products.router)
    app.include_router(catalogs.router)
    app.include_router(cart.router)
    app.include_router(admin.router)
