"""
Storefront Backend — Product Route Handlers
=============================================

What:  /product endpoints: list, search, get, create, update, delete.
How:   Query parameters are declared one by one (camelCase on the wire),
       collected into ProductQuery models and passed to ProductService.
       Unknown query parameters are rejected with 400.

Route Inventory:
    GET    /product              list with filters, sort, pagination
    GET    /product/search       same plus free-text search
    GET    /product/get/{id}     single product
    POST   /product              create (201)
    PUT    /product/{id}         partial update
    DELETE /product/{id}         delete (204)
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response

from storefront.dependencies import get_product_service, reject_unknown_params
from storefront.schemas.common import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    ErrorResponse,
)
from storefront.schemas.product import (
    SORT_FIELD_PATTERN,
    ProductCreate,
    ProductListResponse,
    ProductQuery,
    ProductResponse,
    ProductSearchQuery,
    ProductUpdate,
)
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product", tags=["Products"])

LIST_PARAMS = ("category", "minPrice", "maxPrice", "page", "size", "sortBy", "order")
SEARCH_PARAMS = LIST_PARAMS + ("search",)

NOT_FOUND = {404: {"description": "Product not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid request", "model": ErrorResponse}}


def product_query(
    category: Optional[str] = Query(default=None, description="Filter by category"),
    min_price: Optional[float] = Query(
        default=None, alias="minPrice", allow_inf_nan=False, description="Minimum price"
    ),
    max_price: Optional[float] = Query(
        default=None, alias="maxPrice", allow_inf_nan=False, description="Maximum price"
    ),
    page: int = Query(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="Page number for pagination"),
    size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"),
    sort_by: str = Query(
        default="price",
        alias="sortBy",
        pattern=SORT_FIELD_PATTERN,
        description="Field to sort by (e.g., price)",
    ),
    order: Literal["asc", "desc"] = Query(default="asc", description="Sort order"),
) -> ProductQuery:
    return ProductQuery(
        category=category,
        min_price=min_price,
        max_price=max_price,
        page=page,
        size=size,
        sort_by=sort_by,
        order=order,
    )


def product_search_query(
    base: ProductQuery = Depends(product_query),
    search: Optional[str] = Query(default=None, description="Search term (name or description)"),
) -> ProductSearchQuery:
    return ProductSearchQuery(**base.model_dump(), search=search)


@router.get(
    "",
    response_model=ProductListResponse,
    responses=BAD_REQUEST,
    summary="Get a list of products",
    dependencies=[Depends(reject_unknown_params(*LIST_PARAMS))],
)
async def list_products(
    response: Response,
    query: ProductQuery = Depends(product_query),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    result = await service.list_products(query)
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/search",
    response_model=ProductListResponse,
    responses=BAD_REQUEST,
    summary="Search products with optional filters, pagination, and sorting",
    description=(
        "Case-insensitive substring search over name and description, combined "
        "with the category and price filters of the listing endpoint."
    ),
    dependencies=[Depends(reject_unknown_params(*SEARCH_PARAMS))],
)
async def search_products(
    response: Response,
    query: ProductSearchQuery = Depends(product_search_query),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    result = await service.search_products(query)
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/get/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Get product details by ID",
)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.get_product(product_id)


@router.post(
    "",
    status_code=201,
    response_model=ProductResponse,
    responses=BAD_REQUEST,
    summary="Create a new product",
)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.create_product(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**NOT_FOUND, **BAD_REQUEST},
    summary="Update an existing product",
    description="Only the fields present in the body are overwritten.",
)
async def update_product(
    product_id: str,
    changes: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.update_product(product_id, changes)


@router.delete(
    "/{product_id}",
    status_code=204,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> Response:
    await service.delete_product(product_id)
    return Response(status_code=204)
