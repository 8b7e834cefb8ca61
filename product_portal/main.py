"""
==============================================================================
Product Portal - Application Entry Point
==============================================================================

FastAPI application with:
- Public product browsing API
- Passcode-gated admin API for catalog CRUD
- Code import/export of the whole catalog
- Memory, key-value or remote-service persistence

Usage:
------
    # Development
    uvicorn product_portal.main:app --reload

    # Production
    uvicorn product_portal.main:app --host 0.0.0.0 --port 8000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from product_portal.api.router import api_router
from product_portal.catalog import CatalogBackend
from product_portal.config import Settings, get_settings
from product_portal.core.context import AppContext
from product_portal.core.exceptions import register_exception_handlers


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Building the AppContext on startup and tearing it down on shutdown
    - Middleware configuration
    - Router registration
    - Exception handler setup
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[CatalogBackend] = None
    ):
        """
        Initialize the application.

        Args:
            settings: Settings to use instead of the global ones
            backend: Backing collaborator to use instead of the configured one
        """
        self._settings = settings or get_settings()
        self._backend = backend
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Product catalog portal with a passcode-gated admin dashboard",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        self._register_routers(app)
        self._register_root(app)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        context = AppContext(self._settings, backend=self._backend)
        try:
            await self._startup(context)
            app.state.context = context
            yield
        finally:
            app.state.context = None
            await self._shutdown(context)

    async def _startup(self, context: AppContext) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        await context.startup()

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(
            f"📦 Catalog: {len(context.store)}/{context.store.max_products} products "
            f"({context.store.backend.name} backend)"
        )
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    async def _shutdown(self, context: AppContext) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        await context.shutdown()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_routers(self, app: FastAPI) -> None:
        """Register API routers."""
        app.include_router(api_router)

    def _register_root(self, app: FastAPI) -> None:
        """Register root endpoint."""

        @app.get("/", include_in_schema=False)
        async def root():
            """Redirect to the interactive API docs."""
            return RedirectResponse(url="/docs")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "product_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
