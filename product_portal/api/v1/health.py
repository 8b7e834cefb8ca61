"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from product_portal.core.context import AppContext
from product_portal.core.dependencies import get_context


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, context: AppContext):
        self._context = context

    def check_storage(self) -> str:
        """Check the kv database when one is in use."""
        database = self._context.database
        if database is None:
            return "healthy"
        return "healthy" if database.verify_connection() else "unhealthy"

    def get_health(self) -> dict:
        """Get full health status."""
        store = self._context.store
        storage_status = self.check_storage()
        catalog_status = "healthy" if store.loaded else "unhealthy"

        if storage_status == "healthy" and catalog_status == "healthy":
            overall = "healthy"
        else:
            overall = "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "storage": storage_status,
                "catalog": catalog_status,
            },
            "details": {
                "backend": store.backend.name,
                "products_loaded": len(store),
                "max_products": store.max_products,
            }
        }


@router.get("")
async def health_check(context: AppContext = Depends(get_context)):
    """
    Health check endpoint.

    Returns system status including API, storage and catalog.
    """
    controller = HealthController(context)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
