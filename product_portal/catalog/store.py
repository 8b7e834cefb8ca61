"""
==============================================================================
Catalog Store Module
==============================================================================

Single authoritative holder of the product collection.

Features:
---------
- Capacity limit (max_products) on add and bulk import
- Unique, store-assigned ids and timestamps
- Persistence through an injected CatalogBackend
- Change notification to subscribers after every committed change

Commit Order:
------------
    ┌─────────────┐     ┌─────────────┐     ┌─────────────┐     ┌─────────────┐
    │  Validate   │────▶│   Backend   │────▶│ Swap local  │────▶│   Notify    │
    │ (capacity)  │     │   accepts   │     │ collection  │     │ subscribers │
    └─────────────┘     └─────────────┘     └─────────────┘     └─────────────┘

A backend failure raises BackendError before the local swap, so the
in-memory collection never holds a change the backend did not accept.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable, List, Optional, Sequence

from product_portal.core.exceptions import BackendError

from .backends import CatalogBackend
from .models import Product, ProductFormData, utc_now_iso


# Module logger
logger = logging.getLogger(__name__)


Listener = Callable[[List[Product]], None]


class CatalogStore:
    """
    Catalog manager with capacity enforcement and pluggable persistence.

    Attributes:
        max_products: Upper bound on the collection size
        backend: Backing collaborator every change goes through

    Example:
        >>> store = CatalogStore(MemoryBackend(seed_products()), max_products=150)
        >>> await store.load()
        >>> product = await store.add(form_data)
        >>> store.get_by_id(product.id)
    """

    def __init__(self, backend: CatalogBackend, max_products: int) -> None:
        """
        Initialize an empty store.

        Args:
            backend: Backing collaborator
            max_products: Upper bound on the collection size
        """
        self._backend = backend
        self._max_products = max_products
        self._products: List[Product] = []
        self._listeners: List[Listener] = []
        self._lock = asyncio.Lock()
        self._loaded = False

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def max_products(self) -> int:
        return self._max_products

    @property
    def backend(self) -> CatalogBackend:
        return self._backend

    @property
    def loaded(self) -> bool:
        """True once a load or sync has read the backend successfully."""
        return self._loaded

    def __len__(self) -> int:
        return len(self._products)

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> None:
        """Fill the store from the backend, keeping at most max_products."""
        async with self._lock:
            products = await self._backend.fetch_all()
            self._replace(self._truncate(products), notify=False)
            self._loaded = True

        logger.info(f"✅ Loaded {len(self._products)} products from {self._backend.name} backend")

    async def sync(self) -> List[Product]:
        """
        Re-read the collection from the backend and notify subscribers.

        Returns:
            The refreshed collection
        """
        async with self._lock:
            products = await self._backend.fetch_all()
            self._replace(self._truncate(products))
            self._loaded = True

        logger.info(f"🔄 Synced {len(self._products)} products from {self._backend.name} backend")
        return self.list()

    def _truncate(self, products: List[Product]) -> List[Product]:
        if len(products) > self._max_products:
            logger.warning(
                f"⚠️ Backend holds {len(products)} products, keeping the first {self._max_products}"
            )
            return products[:self._max_products]
        return products

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list(self) -> List[Product]:
        """Get all products in insertion (or provider) order."""
        return self._products.copy()

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get a product by id, or None if it does not exist."""
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def can_add_more(self) -> bool:
        """Check whether another product fits under the capacity limit."""
        return len(self._products) < self._max_products

    def search(self, query: str) -> List[Product]:
        """
        Case-insensitive substring search over name and description.

        An empty query returns every product.
        """
        needle = query.strip().lower()
        if not needle:
            return self.list()

        return [
            p for p in self._products
            if needle in p.name.lower() or needle in p.description.lower()
        ]

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def add(self, data: ProductFormData) -> Optional[Product]:
        """
        Create a product from form data.

        Args:
            data: Caller-supplied fields

        Returns:
            The stored product, or None when the store is full

        Raises:
            BackendError: If the backend rejects the new record
        """
        async with self._lock:
            if not self.can_add_more():
                logger.warning(f"⚠️ Add refused: catalog is full ({self._max_products})")
                return None

            candidate = Product.create(self._new_id(), data)

            try:
                stored = await self._backend.create(candidate)
            except BackendError as e:
                logger.error(f"❌ Failed to add product '{data.name}': {e.message}")
                raise

            self._replace(self._products + [stored])

        logger.info(f"✅ Added product {stored.id} ({stored.name})")
        return stored

    async def update(self, product_id: str, data: ProductFormData) -> Optional[Product]:
        """
        Replace every field of a product except id and createdAt.

        Args:
            product_id: Target product id
            data: New field values

        Returns:
            The updated product, or None when the id is unknown and the
            backend does not report missing ids. A product the store does
            not hold is only listed locally while capacity remains.

        Raises:
            BackendError: If the backend rejects the change
        """
        async with self._lock:
            current = self.get_by_id(product_id)

            if current is None and not self._backend.reports_missing:
                logger.debug(f"Update skipped: product {product_id} not found")
                return None

            if current is None:
                # Backend is authoritative; let it answer for the unknown id
                candidate = Product(id=product_id, updated_at=utc_now_iso(), **data.model_dump())
            else:
                candidate = current.apply(data)

            try:
                stored = await self._backend.modify(candidate)
            except BackendError as e:
                logger.error(f"❌ Failed to update product {product_id}: {e.message}")
                raise

            if current is None and not self.can_add_more():
                logger.warning(
                    f"⚠️ Product {product_id} updated remotely but not listed: "
                    f"catalog is full ({self._max_products})"
                )
            elif current is None:
                self._replace(self._products + [stored])
            else:
                self._replace([stored if p.id == product_id else p for p in self._products])

        logger.info(f"✅ Updated product {product_id}")
        return stored

    async def delete(self, product_id: str) -> bool:
        """
        Remove a product.

        Returns:
            True if a product was removed, False if the id was unknown.
            A backend that reports missing ids decides for ids the store
            does not hold.

        Raises:
            BackendError: If the backend rejects the deletion
        """
        async with self._lock:
            current = self.get_by_id(product_id)

            if current is None and not self._backend.reports_missing:
                logger.debug(f"Delete skipped: product {product_id} not found")
                return False

            try:
                await self._backend.remove(product_id)
            except BackendError as e:
                logger.error(f"❌ Failed to delete product {product_id}: {e.message}")
                raise

            if current is not None:
                self._replace([p for p in self._products if p.id != product_id])

        logger.info(f"🗑️ Deleted product {product_id}")
        return True

    async def import_bulk(self, products: Sequence[Product]) -> bool:
        """
        Replace the entire collection.

        Record shape is not re-validated here; callers parse through the
        code codec first.

        Returns:
            False (collection untouched) if more than max_products were given

        Raises:
            BackendError: If the backend rejects the replacement
        """
        if len(products) > self._max_products:
            logger.warning(
                f"⚠️ Import refused: {len(products)} products exceeds {self._max_products}"
            )
            return False

        async with self._lock:
            try:
                stored = await self._backend.replace_all(list(products))
            except BackendError as e:
                logger.error(f"❌ Failed to import {len(products)} products: {e.message}")
                raise

            self._replace(self._truncate(stored))

        logger.info(f"✅ Imported {len(self._products)} products")
        return True

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Listeners get the new collection after each committed change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, products: List[Product], notify: bool = True) -> None:
        self._products = products

        if not notify:
            return

        snapshot = self.list()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Catalog listener failed")

    def _new_id(self) -> str:
        existing = {p.id for p in self._products}
        while True:
            product_id = str(uuid.uuid4())
            if product_id not in existing:
                return product_id
