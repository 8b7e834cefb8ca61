"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Public browsing of the catalog plus admin-only create, update and delete.

==============================================================================
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from product_portal.catalog import CatalogStore, ProductFormData
from product_portal.core import exceptions
from product_portal.core.dependencies import AdminSession, get_store, require_admin
from product_portal.schemas.common import MessageResponse
from product_portal.schemas.product import (
    CatalogStats,
    CatalogStatsResponse,
    ProductListResponse,
    ProductResponse,
)


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, store: CatalogStore):
        self._store = store

    def list_products(self, query: Optional[str]) -> ProductListResponse:
        """List products, optionally filtered by a search query."""
        products = self._store.search(query) if query else self._store.list()

        return ProductListResponse(
            query=query,
            total=len(products),
            max_products=self._store.max_products,
            products=[p.to_wire() for p in products],
        )

    def get_stats(self) -> CatalogStatsResponse:
        """Get catalog capacity figures."""
        total = len(self._store)
        return CatalogStatsResponse(
            stats=CatalogStats(
                total=total,
                max_products=self._store.max_products,
                remaining=max(self._store.max_products - total, 0),
                can_add_more=self._store.can_add_more(),
                backend=self._store.backend.name,
            )
        )

    def get(self, product_id: str) -> ProductResponse:
        """Get product by id."""
        product = self._store.get_by_id(product_id)

        if not product:
            raise exceptions.product_not_found(product_id)

        return ProductResponse(product=product.to_wire())

    async def create(self, data: ProductFormData) -> ProductResponse:
        """Add a product."""
        product = await self._store.add(data)

        if product is None:
            raise exceptions.capacity_reached(self._store.max_products)

        return ProductResponse(product=product.to_wire())

    async def update(self, product_id: str, data: ProductFormData) -> ProductResponse:
        """Update a product."""
        product = await self._store.update(product_id, data)

        if product is None:
            raise exceptions.product_not_found(product_id)

        return ProductResponse(product=product.to_wire())

    async def delete(self, product_id: str) -> MessageResponse:
        """Delete a product."""
        if not await self._store.delete(product_id):
            raise exceptions.product_not_found(product_id)

        return MessageResponse(message=f"Product '{product_id}' deleted")

    async def sync(self) -> ProductListResponse:
        """Reload the catalog from its backend."""
        products = await self._store.sync()

        return ProductListResponse(
            total=len(products),
            max_products=self._store.max_products,
            products=[p.to_wire() for p in products],
        )


# =============================================================================
# PUBLIC ROUTES
# =============================================================================

@router.get("", response_model=ProductListResponse)
async def list_products(
    q: Optional[str] = Query(None, max_length=200),
    store: CatalogStore = Depends(get_store)
):
    """List products; `q` filters by name or description."""
    controller = ProductController(store)
    return controller.list_products(q)


@router.get("/stats", response_model=CatalogStatsResponse)
async def get_catalog_stats(store: CatalogStore = Depends(get_store)):
    """Get catalog size and capacity."""
    controller = ProductController(store)
    return controller.get_stats()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, store: CatalogStore = Depends(get_store)):
    """Get a single product."""
    controller = ProductController(store)
    return controller.get(product_id)


# =============================================================================
# ADMIN ROUTES
# =============================================================================

@router.post("", response_model=ProductResponse)
async def create_product(
    data: ProductFormData,
    store: CatalogStore = Depends(get_store),
    session: AdminSession = Depends(require_admin)
):
    """Add a product (admin)."""
    controller = ProductController(store)
    return await controller.create(data)


@router.post("/sync", response_model=ProductListResponse)
async def sync_products(
    store: CatalogStore = Depends(get_store),
    session: AdminSession = Depends(require_admin)
):
    """Reload the catalog from its backing store (admin)."""
    controller = ProductController(store)
    return await controller.sync()


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductFormData,
    store: CatalogStore = Depends(get_store),
    session: AdminSession = Depends(require_admin)
):
    """Update a product (admin)."""
    controller = ProductController(store)
    return await controller.update(product_id, data)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    store: CatalogStore = Depends(get_store),
    session: AdminSession = Depends(require_admin)
):
    """Delete a product (admin)."""
    controller = ProductController(store)
    return await controller.delete(product_id)
