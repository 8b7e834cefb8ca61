"""
==============================================================================
Product Schemas Module
==============================================================================

Response schemas for product endpoints and code import/export.

Product records are returned in their wire shape (camelCase keys), the same
shape the code exporter writes.

==============================================================================
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProductResponse(BaseModel):
    """Single product response."""
    success: bool = Field(default=True)
    product: Dict[str, Any]


class ProductListResponse(BaseModel):
    """List of products response."""
    success: bool = Field(default=True)
    query: Optional[str] = None
    total: int
    max_products: int
    products: List[Dict[str, Any]]


class CatalogStats(BaseModel):
    """Catalog capacity figures."""
    total: int = Field(ge=0)
    max_products: int = Field(ge=1)
    remaining: int = Field(ge=0)
    can_add_more: bool
    backend: str


class CatalogStatsResponse(BaseModel):
    """Catalog statistics response."""
    success: bool = Field(default=True)
    stats: CatalogStats


class CodeRequest(BaseModel):
    """Pasted interchange code."""
    code: str = Field(..., max_length=5_000_000)


class CodeExportResponse(BaseModel):
    """Exported interchange code."""
    success: bool = Field(default=True)
    total: int
    code: str


class CodeValidationResponse(BaseModel):
    """Result of parsing pasted code without importing it."""
    success: bool = Field(default=True)
    message: str
    total: int
    products: List[Dict[str, Any]]


class CodeImportResponse(BaseModel):
    """Result of a bulk import."""
    success: bool = Field(default=True)
    message: str
    total: int
