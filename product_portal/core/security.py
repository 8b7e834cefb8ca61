"""
==============================================================================
Security Module - Admin Passcode & Tokens
==============================================================================

Security management for the passcode-gated admin dashboard.

This module implements:
- SecurityManager: passcode verification and admin token handling
- JWT token generation and verification
- Passcode hashing with passlib

The configured passcode is hashed once when the manager is built, so the
plain value is not kept around for comparisons.

Token Structure:
---------------
{
    "sub": "admin",               # Subject (the shared admin session)
    "jti": "uuid",                # Token id, used for logout revocation
    "type": "access",             # Token type
    "exp": 1234567890,            # Expiration timestamp
    "iat": 1234567890             # Issued at timestamp
}

==============================================================================
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from product_portal.config import Settings


# Module logger
logger = logging.getLogger(__name__)


class SecurityManager:
    """
    Security manager for admin authentication.

    Attributes:
        _pwd_context: Passlib context for passcode hashing
        _passcode_hash: Hash of the configured admin passcode
        _settings: Application settings reference

    Example:
        >>> security = SecurityManager(settings)
        >>> security.verify_passcode("change-me")
        True
        >>> token = security.create_access_token()
        >>> security.decode_token(token)["sub"]
        'admin'
    """

    # =========================================================================
    # CLASS CONSTANTS
    # =========================================================================

    TOKEN_TYPE_ACCESS = "access"
    ADMIN_SUBJECT = "admin"

    HASH_SCHEMES = ["pbkdf2_sha256"]
    HASH_DEPRECATED = "auto"

    def __init__(self, settings: Settings) -> None:
        """
        Initialize the security manager.

        Args:
            settings: Application settings holding the passcode and JWT config
        """
        self._pwd_context = CryptContext(
            schemes=self.HASH_SCHEMES,
            deprecated=self.HASH_DEPRECATED
        )
        self._settings = settings
        self._passcode_hash = self.hash_passcode(settings.admin_passcode)

        logger.debug("SecurityManager initialized")

    # =========================================================================
    # PASSCODE METHODS
    # =========================================================================

    def hash_passcode(self, plain_passcode: str) -> str:
        """
        Hash a plain text passcode.

        Raises:
            ValueError: If the passcode is empty
        """
        if not plain_passcode:
            raise ValueError("Passcode cannot be empty")

        return self._pwd_context.hash(plain_passcode)

    def verify_passcode(self, plain_passcode: str) -> bool:
        """
        Check a submitted passcode against the configured one.

        Args:
            plain_passcode: Passcode typed by the user

        Returns:
            True if it matches, False otherwise
        """
        if not plain_passcode:
            return False

        try:
            return self._pwd_context.verify(plain_passcode, self._passcode_hash)
        except (ValueError, TypeError) as e:
            logger.warning(f"Passcode verification error: {type(e).__name__}")
            return False

    # =========================================================================
    # JWT TOKEN METHODS
    # =========================================================================

    def create_access_token(self, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create an admin access token.

        Args:
            expires_delta: Custom expiration time (optional)

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(
            minutes=self._settings.access_token_expire_minutes
        ))

        payload = {
            "sub": self.ADMIN_SUBJECT,
            "jti": str(uuid.uuid4()),
            "type": self.TOKEN_TYPE_ACCESS,
            "exp": expire,
            "iat": now,
        }

        token = jwt.encode(
            payload,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm
        )

        logger.debug(f"Created admin token, expires: {expire.isoformat()}")
        return token

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an admin token.

        Raises:
            ExpiredSignatureError: If the token has expired
            JWTError: If the signature, type or subject is wrong
        """
        payload = jwt.decode(
            token,
            self._settings.jwt_secret_key,
            algorithms=[self._settings.jwt_algorithm]
        )

        if payload.get("type") != self.TOKEN_TYPE_ACCESS:
            raise JWTError(f"Unexpected token type: {payload.get('type')}")

        if payload.get("sub") != self.ADMIN_SUBJECT or not payload.get("jti"):
            raise JWTError("Token is not an admin token")

        return payload

    def get_access_token_expire_seconds(self) -> int:
        """Get access token expiration time in seconds."""
        return self._settings.access_token_expire_seconds
