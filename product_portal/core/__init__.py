"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

This package provides:
- Custom exception handling with consistent error responses
- Admin passcode verification and token management
- The application context and FastAPI dependencies

Modules:
--------
- exceptions: AppException, FormatError, BackendError and factory functions
- security: SecurityManager for passcode and token operations
- context: AppContext owning the store, codec and admin sessions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from product_portal.core import AppException, FormatError

    from product_portal.core import exceptions
    raise exceptions.product_not_found("p1")

    from product_portal.core.dependencies import get_store, require_admin

==============================================================================
"""

from .exceptions import (
    AppException,
    BackendError,
    FormatError,
    register_exception_handlers,
)
from .security import SecurityManager

__all__ = [
    # Exceptions
    "AppException",
    "BackendError",
    "FormatError",
    "register_exception_handlers",
    # Security
    "SecurityManager",
]
