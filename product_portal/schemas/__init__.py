"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: Shared response schemas
- Auth: Admin login schemas
- Product: Product and code interchange schemas

==============================================================================
"""

from .common import MessageResponse
from .auth import LoginRequest, TokenResponse, SessionInfo, SessionResponse
from .product import (
    CatalogStats,
    CatalogStatsResponse,
    CodeExportResponse,
    CodeImportResponse,
    CodeRequest,
    CodeValidationResponse,
    ProductListResponse,
    ProductResponse,
)

__all__ = [
    # Common
    "MessageResponse",
    # Auth
    "LoginRequest",
    "TokenResponse",
    "SessionInfo",
    "SessionResponse",
    # Product
    "CatalogStats",
    "CatalogStatsResponse",
    "CodeExportResponse",
    "CodeImportResponse",
    "CodeRequest",
    "CodeValidationResponse",
    "ProductListResponse",
    "ProductResponse",
]
