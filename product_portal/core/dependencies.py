"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the application context and admin access.

This module implements:
- AuthenticationManager: Class-based admin token checks
- FastAPI dependencies for route protection
- Accessors for the application context, store and codec

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │  get_context()  │  (app.state.context)
                    └────────┬────────┘
             ┌───────────────┼────────────────┐
             │               │                │
     ┌───────▼──────┐ ┌──────▼──────┐ ┌───────▼───────┐
     │ get_store()  │ │ get_codec() │ │ require_admin │
     └──────────────┘ └─────────────┘ └───────────────┘

Usage Examples:
--------------
    @router.get("")
    async def list_products(store: CatalogStore = Depends(get_store)):
        return store.list()

    @router.post("")
    async def add_product(session: AdminSession = Depends(require_admin)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from product_portal.catalog import CatalogStore, CodeCodec
from product_portal.core import exceptions
from product_portal.core.context import AppContext


# Module logger
logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for Swagger UI
security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminSession:
    """An authenticated admin session derived from a bearer token."""

    token_id: str
    issued_at: datetime
    expires_at: datetime


class AuthenticationManager:
    """
    Validates admin bearer tokens.

    Attributes:
        _context: Application context holding security and sessions

    Example:
        >>> auth = AuthenticationManager(context)
        >>> session = auth.authenticate(credentials)
    """

    def __init__(self, context: AppContext) -> None:
        self._context = context

    def extract_token(self, credentials: Optional[HTTPAuthorizationCredentials]) -> str:
        """
        Extract the token from the Authorization header.

        Raises:
            AppException: If no credentials were sent
        """
        if not credentials:
            logger.debug("No authorization credentials provided")
            raise exceptions.token_invalid()

        return credentials.credentials

    def authenticate(self, credentials: Optional[HTTPAuthorizationCredentials]) -> AdminSession:
        """
        Turn bearer credentials into an admin session.

        Raises:
            AppException: TOKEN_INVALID, TOKEN_EXPIRED
        """
        token = self.extract_token(credentials)

        try:
            payload = self._context.security.decode_token(token)
        except ExpiredSignatureError:
            raise exceptions.token_expired()
        except JWTError as e:
            logger.warning(f"Rejected admin token: {e}")
            raise exceptions.token_invalid()

        if self._context.sessions.is_revoked(payload["jti"]):
            logger.debug("Rejected revoked admin token")
            raise exceptions.token_invalid()

        return AdminSession(
            token_id=payload["jti"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


# =============================================================================
# FASTAPI DEPENDENCY FUNCTIONS
# =============================================================================

def get_context(request: Request) -> AppContext:
    """Get the application context created at startup."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise exceptions.internal_error("Application context is not initialized")
    return context


def get_store(context: AppContext = Depends(get_context)) -> CatalogStore:
    """Get the catalog store."""
    return context.store


def get_codec(context: AppContext = Depends(get_context)) -> CodeCodec:
    """Get the code interchange codec."""
    return context.codec


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    context: AppContext = Depends(get_context)
) -> AdminSession:
    """
    FastAPI dependency that requires a valid admin session.

    Raises:
        AppException: If the bearer token is missing, invalid, expired or revoked
    """
    return AuthenticationManager(context).authenticate(credentials)
