"""
Storefront Backend — Product Service
======================================

What:  Product CRUD plus the translation of listing/search query parameters
       into store filter, sort and pagination calls.
How:   build_product_filter() turns the optional parameters into a Filter
       tree; ProductService runs it against the products collection and
       returns normalized response models.
Who:   Called by the /product routes.

Query translation (GET /product/search?category=lamps&minPrice=10&search=oak):
    And(
        Equals("category", "lamps"),
        Range("price", gte=10),
        Or(Contains("name", "oak"), Contains("description", "oak")),
    )
    sort {"price": 1}, skip (page - 1) * size, limit size
"""

import logging
from typing import Optional

from storefront.database import DocumentStore
from storefront.exceptions import NotFoundError
from storefront.filters import Contains, Equals, Filter, Range, all_of, any_of
from storefront.identifiers import normalize_id, normalize_ids
from storefront.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductQuery,
    ProductResponse,
    ProductSearchQuery,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "description")


def build_product_filter(
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
) -> Filter:
    """
    Conjunctive filter over the optional listing parameters.

    - category: exact match, skipped when empty
    - min_price / max_price: one Range on "price" carrying both bounds
    - search: case-insensitive literal substring on name OR description,
      skipped when empty
    """
    clauses = []
    if category:
        clauses.append(Equals("category", category))
    if min_price is not None or max_price is not None:
        clauses.append(Range("price", gte=min_price, lte=max_price))
    if search:
        clauses.append(any_of(*(Contains(field, search) for field in SEARCH_FIELDS)))
    return all_of(*clauses)


class ProductService:
    """
    Business logic for the products collection.

    The store is injected; the service holds no other state.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _page(self, filter_expr: Filter, query: ProductQuery) -> ProductListResponse:
        total = await self.store.count(filter_expr)
        docs = await self.store.find(
            filter_expr,
            sort={query.sort_by: query.sort_direction},
            skip=query.skip,
            limit=query.size,
        )
        return ProductListResponse(
            total=total,
            products=[ProductResponse.model_validate(d) for d in normalize_ids(docs)],
        )

    async def list_products(self, query: ProductQuery) -> ProductListResponse:
        filter_expr = build_product_filter(
            category=query.category,
            min_price=query.min_price,
            max_price=query.max_price,
        )
        return await self._page(filter_expr, query)

    async def search_products(self, query: ProductSearchQuery) -> ProductListResponse:
        filter_expr = build_product_filter(
            category=query.category,
            min_price=query.min_price,
            max_price=query.max_price,
            search=query.search,
        )
        return await self._page(filter_expr, query)

    async def get_product(self, product_id: str) -> ProductResponse:
        doc = await self.store.find_one({"_id": product_id})
        if doc is None:
            raise NotFoundError(resource="product", resource_id=product_id)
        return ProductResponse.model_validate(normalize_id(doc))

    async def create_product(self, product: ProductCreate) -> ProductResponse:
        doc = await self.store.insert(product.model_dump(exclude_none=True))
        logger.info("Product created: %s (%s)", doc["_id"], doc["name"])
        return ProductResponse.model_validate(normalize_id(doc))

    async def update_product(self, product_id: str, changes: ProductUpdate) -> ProductResponse:
        """
        Overwrite only the supplied fields.

        Raises:
            NotFoundError: no product with this id.
        """
        updated = await self.store.update({"_id": product_id}, {"$set": changes.changes()})
        if not updated:
            raise NotFoundError(resource="product", resource_id=product_id)
        logger.info("Product updated: %s fields=%s", product_id, sorted(changes.changes()))
        return ProductResponse.model_validate(normalize_id(updated[0]))

    async def delete_product(self, product_id: str) -> None:
        removed = await self.store.remove({"_id": product_id})
        if removed == 0:
            raise NotFoundError(resource="product", resource_id=product_id)
        logger.info("Product deleted: %s", product_id)
