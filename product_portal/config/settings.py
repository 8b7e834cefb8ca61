"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

This module exposes a single cached Settings instance so the catalog store,
the code codec and the API all agree on the same limits (most importantly
``max_products``).

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Backend selection (memory / kv / remote) with validation

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Security Considerations:
-----------------------
- Never commit .env files to version control
- Change ADMIN_PASSCODE and JWT_SECRET_KEY before deploying

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


STORAGE_BACKENDS = ("memory", "kv", "remote")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        max_products: Upper bound on the catalog size
        storage_backend: Backing collaborator (memory, kv, remote)
        seed_catalog: Seed the memory backend from the hardcoded list
        database_url: SQLAlchemy URL used by the kv backend
        storage_key: Key the kv backend stores the catalog under
        remote_base_url: Base URL of the remote product service
        remote_api_key: Bearer key sent to the remote product service
        remote_timeout_seconds: Timeout for remote calls
        admin_passcode: Shared passcode for the admin dashboard
        jwt_secret_key: Secret key for admin token signing
        jwt_algorithm: Algorithm for token signing (e.g., HS256)
        access_token_expire_minutes: Admin token lifetime in minutes
        export_declared_name: Variable name used by code export
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings(max_products=2)
        >>> settings.storage_backend
        'memory'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Product Portal API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(default="0.0.0.0", description="Server bind address")

    port: int = Field(default=8000, ge=1, le=65535, description="Server port number")

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    max_products: int = Field(
        default=150,
        ge=1,
        le=10000,
        description="Maximum number of products the catalog can hold"
    )

    storage_backend: str = Field(
        default="memory",
        description="Backing collaborator: memory, kv or remote"
    )

    seed_catalog: bool = Field(
        default=True,
        description="Seed the memory backend with the hardcoded products"
    )

    export_declared_name: str = Field(
        default="HARDCODED_PRODUCTS",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
        description="Variable name used when exporting code"
    )

    # =========================================================================
    # KEY-VALUE STORAGE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/portal.db",
        description="SQLAlchemy database connection string"
    )

    storage_key: str = Field(
        default="product-portal.products",
        min_length=1,
        description="Key the catalog is stored under"
    )

    # =========================================================================
    # REMOTE SERVICE SETTINGS
    # =========================================================================
    remote_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the remote product service"
    )

    remote_api_key: Optional[str] = Field(
        default=None,
        description="Bearer key for the remote product service"
    )

    remote_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout for remote product service calls"
    )

    # =========================================================================
    # ADMIN AUTHENTICATION SETTINGS
    # =========================================================================
    admin_passcode: str = Field(
        default="change-me",
        min_length=4,
        description="Shared passcode for the admin dashboard"
    )

    jwt_secret_key: str = Field(
        default="change-this-in-production",
        min_length=16,
        description="Secret key for admin token signing"
    )

    jwt_algorithm: str = Field(default="HS256", description="Algorithm for token signing")

    access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,  # Max 24 hours
        description="Admin token lifetime in minutes"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize application environment, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, value: str) -> str:
        """
        Validate the backing collaborator name.

        Raises:
            ValueError: If the backend is not one of memory, kv, remote
        """
        normalized = value.lower().strip()

        if normalized not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend: {value}. "
                f"Supported: {', '.join(STORAGE_BACKENDS)}"
            )

        return normalized

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """Validate JWT algorithm is a supported HMAC algorithm."""
        supported = {"HS256", "HS384", "HS512"}

        if value.upper() not in supported:
            raise ValueError(
                f"Unsupported JWT algorithm: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return value.upper()

    @model_validator(mode="after")
    def validate_remote_settings(self) -> "Settings":
        """The remote backend needs somewhere to talk to."""
        if self.storage_backend == "remote" and not self.remote_base_url:
            raise ValueError("REMOTE_BASE_URL is required when STORAGE_BACKEND=remote")
        return self

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    @property
    def access_token_expire_seconds(self) -> int:
        """Get admin token expiry in seconds."""
        return self.access_token_expire_minutes * 60

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"storage_backend={self.storage_backend!r}, "
            f"max_products={self.max_products})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.app_name)
        'Product Portal API'
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
