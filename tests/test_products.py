"""Tests for product catalog management."""

import pytest

from fieldservice.services.backend import BackendError
from fieldservice.services.memory_backend import InMemoryBackend
from fieldservice.services.products import (
    DuplicateProductCodeError,
    ProductCatalog,
    ProductInput,
    find_duplicate_code,
    search_products,
)
from fieldservice.services.seed import demo_state


class TestSearch:
    def setup_method(self):
        self.products = demo_state().products

    def test_blank_query_returns_all(self):
        assert len(search_products(self.products, "  ")) == 2

    def test_matches_code(self):
        assert [p.code for p in search_products(self.products, "ref")] == ["REF-001"]

    def test_matches_name(self):
        assert [p.code for p in search_products(self.products, "FILTER")] == ["FIL-010"]

    def test_no_match(self):
        assert search_products(self.products, "motor") == []


class TestDuplicateCodes:
    def test_trimmed_case_insensitive(self):
        products = demo_state().products
        assert find_duplicate_code(products, "  ref-001 ").id == "prod_1"

    def test_excluded_product_is_ignored(self):
        products = demo_state().products
        assert find_duplicate_code(products, "REF-001", exclude_id="prod_1") is None


class TestProductCatalog:
    @pytest.mark.asyncio
    async def test_add_product(self, backend):
        catalog = ProductCatalog(backend)
        product = await catalog.add_product(ProductInput(code=" MOT-200 ", name="Drain pump", stock=3))
        assert product.code == "MOT-200"
        assert product.id.startswith("prod_")
        assert product.initial_stock == 3
        assert product in backend.state.products

    @pytest.mark.asyncio
    async def test_add_duplicate_never_writes(self, backend):
        catalog = ProductCatalog(backend)
        with pytest.raises(DuplicateProductCodeError) as exc_info:
            await catalog.add_product(ProductInput(code="ref-001", name="Other"))
        assert exc_info.value.code == "ref-001"
        assert backend.write_count == 0

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, backend):
        with pytest.raises(ValueError):
            await ProductCatalog(backend).add_product(ProductInput(code="X-1", name=" "))

    @pytest.mark.asyncio
    async def test_update_keeps_own_code(self, backend):
        catalog = ProductCatalog(backend)
        updated = await catalog.update_product(
            "prod_1", ProductInput(code="REF-001", name="Compressor 1/3 HP", stock=2)
        )
        assert updated.name == "Compressor 1/3 HP"
        assert updated.initial_stock == 4
        assert backend.state.products[0].stock == 2

    @pytest.mark.asyncio
    async def test_update_to_taken_code(self, backend):
        catalog = ProductCatalog(backend)
        with pytest.raises(DuplicateProductCodeError):
            await catalog.update_product("prod_1", ProductInput(code="FIL-010", name="X"))

    @pytest.mark.asyncio
    async def test_update_unknown(self, backend):
        with pytest.raises(KeyError):
            await ProductCatalog(backend).update_product("nope", ProductInput(code="A", name="B"))

    @pytest.mark.asyncio
    async def test_delete(self, backend):
        catalog = ProductCatalog(backend)
        await catalog.delete_product("prod_2")
        assert [p.id for p in backend.state.products] == ["prod_1"]
        with pytest.raises(KeyError):
            await catalog.delete_product("prod_2")

    @pytest.mark.asyncio
    async def test_missing_state(self):
        with pytest.raises(BackendError):
            await ProductCatalog(InMemoryBackend()).add_product(ProductInput(code="A", name="B"))
