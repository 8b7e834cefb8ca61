"""
==============================================================================
Authentication Endpoints
==============================================================================

Admin passcode login, session info and logout.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from product_portal.core import exceptions
from product_portal.core.context import AppContext
from product_portal.core.dependencies import AdminSession, get_context, require_admin
from product_portal.schemas.auth import (
    LoginRequest,
    SessionInfo,
    SessionResponse,
    TokenResponse,
)
from product_portal.schemas.common import MessageResponse


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class AuthController:
    """Controller for admin authentication."""

    def __init__(self, context: AppContext):
        self._context = context

    def login(self, request: LoginRequest) -> TokenResponse:
        """Check the passcode and issue an admin token."""
        security = self._context.security

        if not security.verify_passcode(request.passcode):
            logger.warning("Admin login failed: incorrect passcode")
            raise exceptions.invalid_passcode()

        logger.info("✅ Admin authenticated")
        return TokenResponse(
            access_token=security.create_access_token(),
            expires_in=security.get_access_token_expire_seconds(),
        )

    def logout(self, session: AdminSession) -> MessageResponse:
        """Revoke the presented token."""
        self._context.sessions.revoke(session.token_id, session.expires_at)
        return MessageResponse(message="Logged out")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, context: AppContext = Depends(get_context)):
    """Exchange the admin passcode for a bearer token."""
    controller = AuthController(context)
    return controller.login(request)


@router.get("/session", response_model=SessionResponse)
async def get_session(session: AdminSession = Depends(require_admin)):
    """Get the current admin session."""
    return SessionResponse(
        session=SessionInfo(issued_at=session.issued_at, expires_at=session.expires_at)
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    session: AdminSession = Depends(require_admin),
    context: AppContext = Depends(get_context)
):
    """End the current admin session."""
    controller = AuthController(context)
    return controller.logout(session)
