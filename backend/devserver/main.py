"""FastAPI application factory."""

import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from devserver.api.errors import register_exception_handlers
from devserver.api.routes import echo, health, items
from devserver.config import Settings
from devserver.core.item_store import ItemStore
from devserver.middleware.pipeline import build_middleware

APP_VERSION = "0.1.0"
API_PREFIX = "/api"


def create_app(settings: Settings | None = None, item_store: ItemStore | None = None) -> FastAPI:
    """Build the router and wrap it in the layer stack."""
    settings = settings or Settings()

    app = FastAPI(
        title="dev-server",
        version=APP_VERSION,
        openapi_url=f"{API_PREFIX}/openapi.json" if settings.dev_mode else None,
        docs_url=f"{API_PREFIX}/docs" if settings.dev_mode else None,
        redoc_url=None,
        middleware=build_middleware(),
    )
    app.state.settings = settings
    app.state.item_store = item_store if item_store is not None else ItemStore()

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers, all under /api
    # -----------------------------------------------------------------------

    app.include_router(health.router, prefix=API_PREFIX, tags=["system"])
    app.include_router(echo.router, prefix=API_PREFIX, tags=["echo"])
    app.include_router(items.router, prefix=API_PREFIX, tags=["items"])

    # -----------------------------------------------------------------------
    # Static fallback
    # -----------------------------------------------------------------------

    # The router's default app only runs when no route matched the path at
    # all, so a known path with the wrong method still gets a 405 instead of
    # being looked up on disk.
    os.makedirs(settings.static_dir, exist_ok=True)
    app.router.default = StaticFiles(directory=settings.static_dir, html=True)

    return app
