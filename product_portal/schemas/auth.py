"""
==============================================================================
Authentication Schemas Module
==============================================================================

Request and response schemas for the admin passcode login.

==============================================================================
"""

from datetime import datetime
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Admin passcode submission."""
    passcode: str = Field(..., min_length=1, max_length=200)


class TokenResponse(BaseModel):
    """Token response after a successful login."""
    success: bool = Field(default=True)
    access_token: str
    token_type: str = Field(default="bearer")
    expires_in: int


class SessionInfo(BaseModel):
    """Current admin session details."""
    authenticated: bool = Field(default=True)
    issued_at: datetime
    expires_at: datetime


class SessionResponse(BaseModel):
    """Current admin session response."""
    success: bool = Field(default=True)
    session: SessionInfo
