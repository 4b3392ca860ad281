"""
Storefront Backend — FastAPI Dependencies
===========================================

What:  Hands the services created in the lifespan to route handlers, and
       enforces strict query strings.
How:   The lifespan stores the Datastore and services on `app.state`; the
       getters below read them back per request.

    @router.get("/orders")
    async def list_orders(service: OrderService = Depends(get_order_service)):
        ...
"""

from typing import Callable

from fastapi import Request

from storefront.database import Datastore
from storefront.exceptions import ValidationError
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.upload_service import UploadService


def get_datastore(request: Request) -> Datastore:
    return request.app.state.datastore


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def reject_unknown_params(*allowed: str) -> Callable[[Request], None]:
    """
    Dependency factory refusing query parameters outside `allowed`.

    Raises:
        ValidationError (400) naming the unexpected parameters.
    """
    allowed_names = frozenset(allowed)

    def check_query_params(request: Request) -> None:
        unknown = sorted(set(request.query_params.keys()) - allowed_names)
        if unknown:
            raise ValidationError(
                message=f"Unknown query parameter(s): {', '.join(unknown)}",
                field=unknown[0],
                context={"unknown": unknown, "allowed": sorted(allowed_names)},
            )

    return check_query_params
