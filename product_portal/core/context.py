"""
==============================================================================
Application Context Module
==============================================================================

Root object owning every piece of per-application mutable state.

    ┌──────────────────────────────────────────────────────────┐
    │                       AppContext                          │
    ├──────────────────────────────────────────────────────────┤
    │ settings    Settings                                      │
    │ security    SecurityManager                               │
    │ sessions    AdminSessionRegistry   (revoked admin tokens) │
    │ database    DatabaseManager        (kv backend only)      │
    │ store       CatalogStore  ──▶ CatalogBackend              │
    │ codec       CodeCodec                                     │
    └──────────────────────────────────────────────────────────┘

The context is built and started in the FastAPI lifespan, stored on
``app.state.context`` and handed to route handlers through dependencies.

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from product_portal.catalog import (
    CatalogBackend,
    CatalogStore,
    CodeCodec,
    KeyValueBackend,
    MemoryBackend,
    Product,
    RemoteBackend,
    seed_products,
)
from product_portal.config import Settings
from product_portal.db import DatabaseManager

from .exceptions import BackendError
from .security import SecurityManager


# Module logger
logger = logging.getLogger(__name__)


class AdminSessionRegistry:
    """
    Tracks admin tokens revoked by logout until they expire.

    Example:
        >>> sessions = AdminSessionRegistry()
        >>> sessions.revoke("token-id", expires_at)
        >>> sessions.is_revoked("token-id")
        True
    """

    def __init__(self) -> None:
        self._revoked: Dict[str, datetime] = {}

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        self._prune()
        self._revoked[token_id] = expires_at
        logger.info("🔒 Admin session ended")

    def is_revoked(self, token_id: str) -> bool:
        self._prune()
        return token_id in self._revoked

    def clear(self) -> None:
        self._revoked.clear()

    def _prune(self) -> None:
        now = datetime.now(timezone.utc)
        for token_id, expires_at in list(self._revoked.items()):
            if expires_at <= now:
                del self._revoked[token_id]


class AppContext:
    """
    Application state with explicit startup and shutdown.

    Attributes:
        settings: Application settings
        security: Passcode and token manager
        sessions: Revoked admin sessions
        database: Database manager (kv backend only)
        store: Catalog store
        codec: Code interchange codec

    Example:
        >>> context = AppContext(settings)
        >>> await context.startup()
        >>> context.store.list()
        >>> await context.shutdown()
    """

    def __init__(
        self,
        settings: Settings,
        backend: Optional[CatalogBackend] = None
    ) -> None:
        """
        Build the context.

        Args:
            settings: Application settings
            backend: Backing collaborator to use instead of the one the
                settings select
        """
        self.settings = settings
        self.security = SecurityManager(settings)
        self.sessions = AdminSessionRegistry()
        self.database: Optional[DatabaseManager] = None
        self.codec = CodeCodec(
            max_products=settings.max_products,
            declared_name=settings.export_declared_name,
        )
        self.store = CatalogStore(
            backend or self._create_backend(),
            max_products=settings.max_products,
        )
        self._unsubscribe = None

    def _create_backend(self) -> CatalogBackend:
        """Build the backing collaborator the settings select."""
        backend_name = self.settings.storage_backend

        if backend_name == "kv":
            self.database = DatabaseManager(self.settings.database_url, echo=self.settings.debug)
            return KeyValueBackend(self.database, self.settings.storage_key)

        if backend_name == "remote":
            return RemoteBackend(
                self.settings.remote_base_url,
                api_key=self.settings.remote_api_key,
                timeout_seconds=self.settings.remote_timeout_seconds,
            )

        seed = seed_products() if self.settings.seed_catalog else []
        return MemoryBackend(seed)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def startup(self) -> None:
        """
        Create storage, load the catalog and start change logging.

        A backend that cannot be read leaves the catalog empty and
        unloaded; ``POST /products/sync`` retries the load.
        """
        try:
            if self.database is not None:
                self.database.create_tables()
            await self.store.load()
        except (BackendError, SQLAlchemyError) as e:
            logger.error(f"❌ Catalog not loaded from {self.store.backend.name} backend: {e}")

        self._unsubscribe = self.store.subscribe(self._log_export)

    async def shutdown(self) -> None:
        """Stop change logging and release backend resources."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        self.sessions.clear()
        await self.store.backend.close()

    def _log_export(self, products: List[Product]) -> None:
        """Log the declared export so the change can be pasted into source."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Catalog changed ({len(products)} products), current code:\n"
                f"{self.codec.export(products)}"
            )
