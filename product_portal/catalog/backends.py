"""
==============================================================================
Catalog Backends Module
==============================================================================

Backing collaborators the catalog store persists through.

All backends implement the same capability interface so the store's logic
is written once and the persistence mechanism is chosen at startup:

    ┌──────────────────┐
    │   CatalogStore   │
    └────────┬─────────┘
             │ CatalogBackend
    ┌────────┼──────────────────────┬──────────────────────┐
    │        │                      │                      │
┌───▼────────────┐   ┌──────────────▼───┐   ┌──────────────▼───┐
│ MemoryBackend  │   │ KeyValueBackend  │   │  RemoteBackend   │
│ (seeded list)  │   │ (SQL key/value)  │   │ (HTTP service)   │
└────────────────┘   └──────────────────┘   └──────────────────┘

Memory and key-value backends keep a snapshot of the whole collection and
rewrite it on every change. The remote backend forwards each operation to
the product service and returns the record the service sent back.

==============================================================================
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from product_portal.core.exceptions import BackendError
from product_portal.db import DatabaseManager, StorageEntry

from .models import Product


# Module logger
logger = logging.getLogger(__name__)


class CatalogBackend(ABC):
    """
    Capability interface for product persistence.

    Attributes:
        name: Short backend name used in logs and health output
        reports_missing: True when the backend itself reports unknown ids,
            so the store must delegate operations on ids it does not hold
    """

    name = "abstract"
    reports_missing = False

    @abstractmethod
    async def fetch_all(self) -> List[Product]:
        """Return the persisted collection."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Persist a new record and return the stored version."""

    @abstractmethod
    async def modify(self, product: Product) -> Product:
        """Persist an updated record and return the stored version."""

    @abstractmethod
    async def remove(self, product_id: str) -> None:
        """Delete a record."""

    @abstractmethod
    async def replace_all(self, products: List[Product]) -> List[Product]:
        """Replace the whole collection and return what is now stored."""

    async def close(self) -> None:
        """Release any resources held by the backend."""


# =============================================================================
# SNAPSHOT BACKENDS
# =============================================================================

class SnapshotBackend(CatalogBackend):
    """
    Backend that persists the whole collection on every change.

    Subclasses implement ``_read`` and ``_write``; both are blocking and run
    in a worker thread.
    """

    def __init__(self) -> None:
        self._snapshot: List[Product] = []

    async def fetch_all(self) -> List[Product]:
        self._snapshot = await asyncio.to_thread(self._read)
        return list(self._snapshot)

    async def create(self, product: Product) -> Product:
        await self._commit(self._snapshot + [product])
        return product

    async def modify(self, product: Product) -> Product:
        await self._commit([product if p.id == product.id else p for p in self._snapshot])
        return product

    async def remove(self, product_id: str) -> None:
        await self._commit([p for p in self._snapshot if p.id != product_id])

    async def replace_all(self, products: List[Product]) -> List[Product]:
        await self._commit(list(products))
        return list(products)

    async def _commit(self, products: List[Product]) -> None:
        await asyncio.to_thread(self._write, products)
        self._snapshot = products

    @abstractmethod
    def _read(self) -> List[Product]:
        """Load the stored collection."""

    @abstractmethod
    def _write(self, products: List[Product]) -> None:
        """Store the collection."""


class MemoryBackend(SnapshotBackend):
    """
    Process-memory backend.

    The collection lives for the lifetime of the process; every restart
    starts again from the seed list.
    """

    name = "memory"

    def __init__(self, seed: Optional[List[Product]] = None) -> None:
        super().__init__()
        self._seed = list(seed or [])
        self._loaded = False

    def _read(self) -> List[Product]:
        if not self._loaded:
            self._loaded = True
            return list(self._seed)
        return list(self._snapshot)

    def _write(self, products: List[Product]) -> None:
        pass


class KeyValueBackend(SnapshotBackend):
    """
    Durable key-value backend.

    The collection is stored as one JSON array under a fixed key in the
    ``storage_entries`` table.

    Example:
        >>> db = DatabaseManager("sqlite:///./storage/portal.db")
        >>> backend = KeyValueBackend(db, "product-portal.products")
    """

    name = "kv"

    def __init__(self, database: DatabaseManager, key: str) -> None:
        super().__init__()
        self._database = database
        self._key = key

    def _read(self) -> List[Product]:
        try:
            with self._database.session_scope() as session:
                entry = session.get(StorageEntry, self._key)
                raw = entry.value if entry else None
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to read '{self._key}': {e}")
            raise BackendError("Could not read stored products", {"key": self._key}) from e

        if raw is None:
            logger.info(f"No stored products under '{self._key}', starting empty")
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("stored value is not a list")
            return [Product.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            # Unreadable data loads as an empty catalog
            logger.error(f"❌ Discarding unreadable products under '{self._key}': {e}")
            return []

    def _write(self, products: List[Product]) -> None:
        value = json.dumps([p.to_wire() for p in products], ensure_ascii=False)

        try:
            with self._database.session_scope() as session:
                entry = session.get(StorageEntry, self._key)
                if entry is None:
                    session.add(StorageEntry(key=self._key, value=value))
                else:
                    entry.value = value
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to write '{self._key}': {e}")
            raise BackendError("Could not save products", {"key": self._key}) from e

        logger.debug(f"Stored {len(products)} products under '{self._key}'")

    async def close(self) -> None:
        self._database.dispose()


# =============================================================================
# REMOTE BACKEND
# =============================================================================

class RemoteBackend(CatalogBackend):
    """
    Backend that forwards every operation to a remote product service.

    Endpoints (relative to ``base_url``):
        GET    /products          -> list of products
        POST   /products          -> created product
        PUT    /products/{id}     -> updated product
        DELETE /products/{id}     -> empty

    Attributes:
        _client: httpx AsyncClient, owned by the backend

    Example:
        >>> backend = RemoteBackend("https://products.example.com/api")
        >>> products = await backend.fetch_all()
        >>> await backend.close()
    """

    name = "remote"
    reports_missing = True

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def fetch_all(self) -> List[Product]:
        data = await self._request("GET", "/products")
        if not isinstance(data, list):
            raise BackendError("Product service returned an unexpected response")
        return [self._to_product(item) for item in data]

    async def create(self, product: Product) -> Product:
        payload = product.to_wire()
        data = await self._request("POST", "/products", json=payload)
        return self._to_product(data)

    async def modify(self, product: Product) -> Product:
        data = await self._request("PUT", f"/products/{product.id}", json=product.to_wire())
        return self._to_product(data)

    async def remove(self, product_id: str) -> None:
        await self._request("DELETE", f"/products/{product_id}")

    async def replace_all(self, products: List[Product]) -> List[Product]:
        """
        Replace the remote collection.

        The service has no bulk endpoint, so this deletes every stored
        record, creates each new one and returns a fresh listing. A failure
        part-way leaves the service in a mixed state; the caller re-syncs.
        """
        for existing in await self.fetch_all():
            await self.remove(existing.id)

        for product in products:
            await self.create(product)

        return await self.fetch_all()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode the JSON body, mapping failures to BackendError."""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"❌ {method} {path} timed out")
            raise BackendError("Product service timed out", {"path": path}) from e
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise BackendError("Product service is unreachable", {"path": path}) from e

        if response.status_code == 404:
            raise BackendError("Product not found", {"path": path}, upstream_status=404)

        if response.is_error:
            message = self._error_message(response)
            logger.error(f"❌ {method} {path} -> {response.status_code}: {message}")
            raise BackendError(message, {"path": path}, upstream_status=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise BackendError("Product service returned invalid JSON", {"path": path}) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull a readable message out of an error response."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
                if isinstance(value, dict) and isinstance(value.get("message"), str):
                    return value["message"]

        return f"Product service error ({response.status_code})"

    @staticmethod
    def _to_product(item: Any) -> Product:
        try:
            return Product.model_validate(item)
        except ValidationError as e:
            raise BackendError("Product service returned an invalid product") from e
