"""
Storefront Backend — Order Route Handlers
===========================================

Route Inventory:
    GET    /orders         paginated list, newest first
    GET    /orders/{id}    single order with items
    POST   /orders         create (201); total, status and timestamp are set by the server
    DELETE /orders/{id}    delete (204)

Orders have no update endpoint.
"""

from fastapi import APIRouter, Depends, Query, Response

from storefront.dependencies import get_order_service, reject_unknown_params
from storefront.schemas.common import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    ErrorResponse,
    PaginationParams,
)
from storefront.schemas.order import OrderCreate, OrderListResponse, OrderResponse
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

NOT_FOUND = {404: {"description": "Order not found", "model": ErrorResponse}}


def pagination(
    page: int = Query(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE, description="Page number for pagination"),
    size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"),
) -> PaginationParams:
    return PaginationParams(page=page, size=size)


@router.get(
    "",
    response_model=OrderListResponse,
    summary="Get a list of all orders",
    dependencies=[Depends(reject_unknown_params("page", "size"))],
)
async def list_orders(
    response: Response,
    params: PaginationParams = Depends(pagination),
    service: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    result = await service.list_orders(params)
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses=NOT_FOUND,
    summary="Get details of a specific order by ID",
)
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return await service.get_order(order_id)


@router.post(
    "",
    status_code=201,
    response_model=OrderResponse,
    summary="Create a new order",
    description=(
        "totalAmount is computed as the sum of item quantities times a flat unit "
        "price; status starts as 'Pending'. Product ids are not verified."
    ),
)
async def create_order(
    order: OrderCreate,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return await service.create_order(order)


@router.delete(
    "/{order_id}",
    status_code=204,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete an order by ID",
)
async def delete_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> Response:
    await service.delete_order(order_id)
    return Response(status_code=204)
