"""
Storefront Backend — Product Service Unit Tests
=================================================

What:  Tests for ProductService and the listing/search filter builder.
How:   The service runs against a real products collection in tmp_path;
       no HTTP involved.

What we test:
    ✅ Query parameters become the expected Filter tree
    ✅ Pagination window and total
    ✅ Category / price / search filtering
    ✅ Partial update touches only supplied fields
    ✅ Missing products raise NotFoundError
"""

import pytest
import pytest_asyncio

from storefront.exceptions import NotFoundError
from storefront.filters import And, Contains, Equals, MatchAll, Or, Range
from storefront.schemas.product import (
    ProductCreate,
    ProductQuery,
    ProductSearchQuery,
    ProductUpdate,
)
from storefront.services.product_service import ProductService, build_product_filter


class TestBuildProductFilter:
    def test_no_parameters_matches_all(self):
        assert build_product_filter() == MatchAll()

    def test_empty_strings_are_ignored(self):
        assert build_product_filter(category="", search="") == MatchAll()

    def test_single_bound(self):
        assert build_product_filter(min_price=10) == Range("price", gte=10, lte=None)

    def test_zero_bound_is_kept(self):
        assert build_product_filter(max_price=0) == Range("price", gte=None, lte=0)

    def test_all_parameters(self):
        expr = build_product_filter(category="lamps", min_price=10, max_price=20, search="oak")
        assert expr == And((
            Equals("category", "lamps"),
            Range("price", gte=10, lte=20),
            Or((Contains("name", "oak"), Contains("description", "oak"))),
        ))


@pytest_asyncio.fixture
async def service(products_store, sample_products):
    for product in sample_products:
        await products_store.insert(product)
    return ProductService(products_store)


class TestListAndSearch:
    @pytest.mark.asyncio
    async def test_default_page_sorted_by_price(self, service, sample_products):
        result = await service.list_products(ProductQuery())

        assert result.total == len(sample_products)
        prices = [p.price for p in result.products]
        assert prices == sorted(p["price"] for p in sample_products)

    @pytest.mark.asyncio
    async def test_pagination_window(self, service, sample_products):
        """Page 2 of size 3 in descending price order is items 3..5."""
        expected = sorted((p["price"] for p in sample_products), reverse=True)[3:6]

        result = await service.list_products(ProductQuery(page=2, size=3, order="desc"))

        assert result.total == len(sample_products)
        assert [p.price for p in result.products] == expected

    @pytest.mark.asyncio
    async def test_page_beyond_end(self, service, sample_products):
        result = await service.list_products(ProductQuery(page=10, size=10))
        assert result.products == []
        assert result.total == len(sample_products)

    @pytest.mark.asyncio
    async def test_category_and_price(self, service):
        query = ProductQuery(category="furniture", min_price=50, max_price=200)
        result = await service.list_products(query)

        assert {p.name for p in result.products} == {"Bookshelf", "Office Chair"}
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_list_ignores_search_term(self, service, sample_products):
        """Only the search endpoint applies the free-text term."""
        result = await service.list_products(ProductSearchQuery(search="oak"))
        assert result.total == len(sample_products)

    @pytest.mark.asyncio
    async def test_search_name_or_description(self, service):
        result = await service.search_products(ProductSearchQuery(search="OAK"))
        assert {p.name for p in result.products} == {"Oak Desk", "Desk Lamp", "Side Table"}

    @pytest.mark.asyncio
    async def test_search_combined_with_category(self, service):
        result = await service.search_products(ProductSearchQuery(search="oak", category="lighting"))
        assert [p.name for p in result.products] == ["Desk Lamp"]

    @pytest.mark.asyncio
    async def test_search_regex_characters_are_literal(self, service):
        result = await service.search_products(ProductSearchQuery(search=".*"))
        assert result.total == 0
        assert result.products == []

    @pytest.mark.asyncio
    async def test_sort_by_name(self, service, sample_products):
        result = await service.list_products(ProductQuery(sort_by="name"))
        assert [p.name for p in result.products] == sorted(p["name"] for p in sample_products)


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_then_get(self, products_store):
        service = ProductService(products_store)
        created = await service.create_product(
            ProductCreate(name="Stool", price=20, category="furniture")
        )

        fetched = await service.get_product(created.id)

        assert fetched == created
        assert fetched.description is None

    @pytest.mark.asyncio
    async def test_get_missing(self, products_store):
        service = ProductService(products_store)
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_product("missing")
        assert exc_info.value.resource_id == "missing"

    @pytest.mark.asyncio
    async def test_partial_update(self, products_store):
        service = ProductService(products_store)
        created = await service.create_product(
            ProductCreate(name="Stool", price=20, category="furniture", description="Pine")
        )

        updated = await service.update_product(created.id, ProductUpdate(price=25))

        assert updated.price == 25
        assert updated.name == "Stool"
        assert updated.category == "furniture"
        assert updated.description == "Pine"
        assert (await service.get_product(created.id)) == updated

    @pytest.mark.asyncio
    async def test_update_ignores_nulls(self, products_store):
        service = ProductService(products_store)
        created = await service.create_product(
            ProductCreate(name="Stool", price=20, category="furniture", description="Pine")
        )

        updated = await service.update_product(created.id, ProductUpdate(description=None, name="Tall stool"))

        assert updated.name == "Tall stool"
        assert updated.description == "Pine"

    @pytest.mark.asyncio
    async def test_update_missing(self, products_store):
        service = ProductService(products_store)
        with pytest.raises(NotFoundError):
            await service.update_product("missing", ProductUpdate(price=1))

    @pytest.mark.asyncio
    async def test_delete(self, products_store):
        service = ProductService(products_store)
        created = await service.create_product(
            ProductCreate(name="Stool", price=20, category="furniture")
        )

        await service.delete_product(created.id)

        with pytest.raises(NotFoundError):
            await service.get_product(created.id)

    @pytest.mark.asyncio
    async def test_delete_missing_leaves_collection_alone(self, service, products_store, sample_products):
        with pytest.raises(NotFoundError):
            await service.delete_product("missing")
        assert await products_store.count() == len(sample_products)
