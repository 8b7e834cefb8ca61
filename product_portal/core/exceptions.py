"""
Application Exception Handling

AppException is the root of every application error; FastAPI renders all of
them through one handler so error bodies look the same everywhere.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Invalid passcode", "INVALID_PASSCODE", 401)
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404, {"product_id": "p1"})

    Error Codes:
        Authentication:
            - INVALID_PASSCODE (401)
            - TOKEN_EXPIRED (401)
            - TOKEN_INVALID (401)

        Catalog:
            - PRODUCT_NOT_FOUND (404)
            - CAPACITY_REACHED (409)
            - FORMAT_ERROR (422)
            - BACKEND_ERROR (502)

        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


class FormatError(AppException):
    """
    Pasted interchange code failed to parse or validate.

    Always recoverable: the caller shows the message and keeps the input.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "FORMAT_ERROR", 422, details)


class BackendError(AppException):
    """The backing collaborator rejected or failed a persistence call."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        upstream_status: Optional[int] = None
    ):
        self.upstream_status = upstream_status
        super().__init__(message, "BACKEND_ERROR", 502, details)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_passcode() -> AppException:
    """Create invalid passcode exception."""
    return AppException("Incorrect passcode. Please try again.", "INVALID_PASSCODE", 401)


def token_expired() -> AppException:
    """Create token expired exception."""
    return AppException("Token has expired", "TOKEN_EXPIRED", 401)


def token_invalid() -> AppException:
    """Create invalid token exception."""
    return AppException("Invalid or malformed token", "TOKEN_INVALID", 401)


def product_not_found(product_id: Optional[str] = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def capacity_reached(max_products: int) -> AppException:
    """Create catalog capacity exception."""
    return AppException(
        f"Maximum limit of {max_products} products reached.",
        "CAPACITY_REACHED",
        409,
        {"max_products": max_products}
    )


def import_exceeds_capacity(count: int, max_products: int) -> AppException:
    """Create bulk import capacity exception."""
    return AppException(
        f"Cannot import {count} products; the maximum is {max_products}.",
        "CAPACITY_REACHED",
        409,
        {"count": count, "max_products": max_products}
    )


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
