"""
==============================================================================
Catalog Store Tests
==============================================================================

Tests for capacity enforcement, mutations, bulk import and change
notification, run against the in-memory backend.

==============================================================================
"""

import asyncio
from typing import List

import pytest

from product_portal.catalog import CatalogStore, MemoryBackend, Product, seed_products
from product_portal.core import BackendError

from helpers import form_data, make_products, product_record


class FlakyBackend(MemoryBackend):
    """Memory backend whose writes can be switched to fail."""

    def __init__(self, seed=None):
        super().__init__(seed)
        self.failing = False

    def _write(self, products: List[Product]) -> None:
        if self.failing:
            raise BackendError("Could not save products")


async def make_store(max_products: int = 150, seed=None, backend=None) -> CatalogStore:
    store = CatalogStore(backend or MemoryBackend(seed), max_products=max_products)
    await store.load()
    return store


# ============================================================================
# LOADING
# ============================================================================

class TestLoad:
    """Tests for loading and syncing."""

    @pytest.mark.asyncio
    async def test_load_seed(self):
        """The memory backend starts from its seed list."""
        store = await make_store(seed=seed_products())
        assert [p.id for p in store.list()] == ["product-1", "product-2", "product-3"]

    @pytest.mark.asyncio
    async def test_load_truncates_to_capacity(self):
        """A backend holding more than max_products is cut to the first max."""
        store = await make_store(max_products=2, seed=make_products(5))
        assert [p.id for p in store.list()] == ["p0", "p1"]

    @pytest.mark.asyncio
    async def test_sync_notifies(self):
        """Sync re-reads the backend and notifies subscribers."""
        store = await make_store(seed=make_products(2))
        seen = []
        store.subscribe(seen.append)

        products = await store.sync()

        assert [p.id for p in products] == ["p0", "p1"]
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_loaded_only_after_successful_read(self):
        """A failed load leaves the store empty and unloaded until sync succeeds."""
        class UnreadableBackend(MemoryBackend):
            failing = True

            def _read(self):
                if self.failing:
                    raise BackendError("Could not read stored products")
                return super()._read()

        backend = UnreadableBackend(make_products(2))
        store = CatalogStore(backend, max_products=10)

        with pytest.raises(BackendError):
            await store.load()
        assert store.loaded is False
        assert store.list() == []

        backend.failing = False
        await store.sync()

        assert store.loaded is True
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_list_returns_copy(self):
        """Mutating the returned list does not touch the store."""
        store = await make_store(seed=make_products(2))
        store.list().clear()
        assert len(store) == 2


# ============================================================================
# ADD
# ============================================================================

class TestAdd:
    """Tests for adding products."""

    @pytest.mark.asyncio
    async def test_add_assigns_id_and_timestamps(self):
        store = await make_store()

        product = await store.add(form_data("Alpha"))

        assert product.id
        assert product.name == "Alpha"
        assert product.usage_instructions == "Use Alpha carefully"
        assert product.created_at == product.updated_at
        assert product.created_at.endswith("Z")
        assert store.get_by_id(product.id) == product

    @pytest.mark.asyncio
    async def test_capacity_scenario(self):
        """With max 2, the third add is refused and the store is unchanged."""
        store = await make_store(max_products=2)

        a = await store.add(form_data("A"))
        b = await store.add(form_data("B"))
        assert store.can_add_more() is False

        c = await store.add(form_data("C"))

        assert c is None
        assert [p.id for p in store.list()] == [a.id, b.id]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self):
        store = await make_store()

        for i in range(20):
            await store.add(form_data(f"Item{i}"))

        ids = [p.id for p in store.list()]
        assert len(set(ids)) == 20

    @pytest.mark.asyncio
    async def test_concurrent_adds_respect_capacity(self):
        """Adds racing each other never push the store past max_products."""
        store = await make_store(max_products=3)

        results = await asyncio.gather(*(store.add(form_data(f"N{i}")) for i in range(6)))

        assert len(store) == 3
        assert sum(1 for r in results if r is not None) == 3

    @pytest.mark.asyncio
    async def test_backend_failure_leaves_store_unchanged(self):
        backend = FlakyBackend(make_products(1))
        store = await make_store(backend=backend)
        seen = []
        store.subscribe(seen.append)
        backend.failing = True

        with pytest.raises(BackendError):
            await store.add(form_data("Lost"))

        assert [p.id for p in store.list()] == ["p0"]
        assert seen == []


# ============================================================================
# UPDATE / DELETE
# ============================================================================

class TestUpdate:
    """Tests for updating products."""

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(self):
        store = await make_store(seed=make_products(2))

        updated = await store.update("p1", form_data("Renamed"))

        assert updated.id == "p1"
        assert updated.name == "Renamed"
        assert updated.external_link == "https://example.com/renamed"
        assert updated.created_at == "2024-01-01T00:00:00.000Z"
        assert updated.updated_at >= updated.created_at
        assert store.get_by_id("p1").name == "Renamed"
        assert [p.id for p in store.list()] == ["p0", "p1"]

    @pytest.mark.asyncio
    async def test_updated_at_never_goes_backwards(self):
        """A record stamped in the future keeps its later updatedAt."""
        future = "2999-01-01T00:00:00.000Z"
        seed = [Product.model_validate(product_record("p0", createdAt=future, updatedAt=future))]
        store = await make_store(seed=seed)

        updated = await store.update("p0", form_data("Later"))

        assert updated.updated_at == future

    @pytest.mark.asyncio
    async def test_update_keeps_extra_fields(self):
        seed = [Product.model_validate(product_record("p0", category="tools"))]
        store = await make_store(seed=seed)

        updated = await store.update("p0", form_data("Tool"))

        assert updated.to_wire()["category"] == "tools"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self):
        store = await make_store(seed=make_products(1))
        seen = []
        store.subscribe(seen.append)

        assert await store.update("missing", form_data()) is None
        assert seen == []


class TestDelete:
    """Tests for deleting products."""

    @pytest.mark.asyncio
    async def test_delete(self):
        store = await make_store(seed=make_products(3))

        assert await store.delete("p1") is True
        assert [p.id for p in store.list()] == ["p0", "p2"]
        assert store.get_by_id("p1") is None

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self):
        store = await make_store(seed=make_products(1))
        assert await store.delete("missing") is False
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_delete_frees_capacity(self):
        store = await make_store(max_products=1, seed=make_products(1))
        assert store.can_add_more() is False

        await store.delete("p0")

        assert store.can_add_more() is True


# ============================================================================
# BULK IMPORT
# ============================================================================

class TestImportBulk:
    """Tests for replacing the whole collection."""

    @pytest.mark.asyncio
    async def test_import_replaces_collection(self):
        store = await make_store(seed=make_products(3))
        incoming = [Product.model_validate(product_record("x1"))]

        assert await store.import_bulk(incoming) is True
        assert [p.id for p in store.list()] == ["x1"]

    @pytest.mark.asyncio
    async def test_import_over_capacity_is_refused(self):
        store = await make_store(max_products=2, seed=make_products(1))
        seen = []
        store.subscribe(seen.append)

        assert await store.import_bulk(make_products(3)) is False
        assert [p.id for p in store.list()] == ["p0"]
        assert seen == []

    @pytest.mark.asyncio
    async def test_import_empty_list(self):
        store = await make_store(seed=make_products(2))
        assert await store.import_bulk([]) is True
        assert store.list() == []

    @pytest.mark.asyncio
    async def test_import_backend_failure(self):
        backend = FlakyBackend(make_products(2))
        store = await make_store(backend=backend)
        backend.failing = True

        with pytest.raises(BackendError):
            await store.import_bulk(make_products(1))

        assert len(store) == 2


# ============================================================================
# SEARCH / SUBSCRIPTIONS
# ============================================================================

class TestSearch:
    """Tests for catalog search."""

    @pytest.mark.asyncio
    async def test_search_name_and_description(self):
        store = await make_store(seed=seed_products())

        assert [p.id for p in store.search("timer")] == ["product-1"]
        assert [p.id for p in store.search("MARKDOWN")] == ["product-2"]

    @pytest.mark.asyncio
    async def test_blank_query_returns_everything(self):
        store = await make_store(seed=seed_products())
        assert len(store.search("  ")) == 3


class TestSubscribe:
    """Tests for change notification."""

    @pytest.mark.asyncio
    async def test_listeners_get_each_change(self):
        store = await make_store()
        seen = []
        store.subscribe(lambda products: seen.append([p.name for p in products]))

        product = await store.add(form_data("A"))
        await store.update(product.id, form_data("B"))
        await store.delete(product.id)

        assert seen == [["A"], ["B"], []]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        store = await make_store()
        seen = []
        unsubscribe = store.subscribe(seen.append)

        unsubscribe()
        await store.add(form_data("A"))

        assert seen == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_commit(self):
        store = await make_store()
        seen = []

        def broken(products):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)

        product = await store.add(form_data("A"))

        assert store.get_by_id(product.id) is not None
        assert len(seen) == 1
