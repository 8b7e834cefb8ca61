"""
==============================================================================
Code Interchange Endpoints
==============================================================================

Admin-only export and import of the catalog as pasteable code.

    export         -> `export const HARDCODED_PRODUCTS: Product[] = [...];`
    export/module  -> downloadable hardcodedProducts.ts
    validate       -> parse pasted code, report what would be imported
    import         -> parse pasted code and replace the whole catalog

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from product_portal.catalog import CatalogStore, CodeCodec
from product_portal.core import exceptions
from product_portal.core.dependencies import AdminSession, get_codec, get_store, require_admin
from product_portal.schemas.product import (
    CodeExportResponse,
    CodeImportResponse,
    CodeRequest,
    CodeValidationResponse,
)


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/code", tags=["Code"])

MODULE_FILENAME = "hardcodedProducts.ts"


class CodeController:
    """Controller for code import/export."""

    def __init__(self, store: CatalogStore, codec: CodeCodec):
        self._store = store
        self._codec = codec

    def export(self, declared: bool) -> CodeExportResponse:
        """Export the current catalog as code."""
        products = self._store.list()
        return CodeExportResponse(
            total=len(products),
            code=self._codec.export(products, declared=declared),
        )

    def export_module(self) -> Response:
        """Export the current catalog as a TypeScript module download."""
        content = self._codec.export_module(self._store.list())
        return Response(
            content=content,
            media_type="text/typescript",
            headers={"Content-Disposition": f'attachment; filename="{MODULE_FILENAME}"'},
        )

    def validate(self, request: CodeRequest) -> CodeValidationResponse:
        """Parse code without touching the catalog."""
        products = self._codec.parse(request.code)
        return CodeValidationResponse(
            message=f"Successfully parsed {len(products)} products",
            total=len(products),
            products=[p.to_wire() for p in products],
        )

    async def import_code(self, request: CodeRequest) -> CodeImportResponse:
        """Parse code and replace the catalog with it."""
        products = self._codec.parse(request.code)

        if not await self._store.import_bulk(products):
            raise exceptions.import_exceeds_capacity(len(products), self._store.max_products)

        logger.info(f"Catalog replaced from pasted code ({len(products)} products)")
        return CodeImportResponse(
            message=f"Successfully updated {len(products)} products!",
            total=len(products),
        )


@router.get("/export", response_model=CodeExportResponse)
async def export_code(
    declared: bool = Query(True, description="Wrap the array in a declaration"),
    store: CatalogStore = Depends(get_store),
    codec: CodeCodec = Depends(get_codec),
    session: AdminSession = Depends(require_admin)
):
    """Export the catalog as pasteable code."""
    controller = CodeController(store, codec)
    return controller.export(declared)


@router.get("/export/module")
async def export_module(
    store: CatalogStore = Depends(get_store),
    codec: CodeCodec = Depends(get_codec),
    session: AdminSession = Depends(require_admin)
):
    """Download the catalog as a hardcodedProducts.ts source file."""
    controller = CodeController(store, codec)
    return controller.export_module()


@router.post("/validate", response_model=CodeValidationResponse)
async def validate_code(
    request: CodeRequest,
    store: CatalogStore = Depends(get_store),
    codec: CodeCodec = Depends(get_codec),
    session: AdminSession = Depends(require_admin)
):
    """Check pasted code without importing it."""
    controller = CodeController(store, codec)
    return controller.validate(request)


@router.post("/import", response_model=CodeImportResponse)
async def import_code(
    request: CodeRequest,
    store: CatalogStore = Depends(get_store),
    codec: CodeCodec = Depends(get_codec),
    session: AdminSession = Depends(require_admin)
):
    """Replace the whole catalog with pasted code."""
    controller = CodeController(store, codec)
    return await controller.import_code(request)
