"""
Storefront Backend — Order Service
====================================

What:  Order listing, retrieval, creation and deletion.
How:   Orders are stored as camelCase documents in the orders collection.
       On creation the server fills in totalAmount, status and createdAt.

Pricing:
    totalAmount = Σ quantity × unit_price, with unit_price a flat placeholder
    (10 by default, ORDER_UNIT_PRICE). Product prices are not looked up and
    productId values are not checked against the products collection.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from storefront.database import DocumentStore
from storefront.exceptions import NotFoundError
from storefront.identifiers import normalize_id, normalize_ids
from storefront.schemas.common import PaginationParams
from storefront.schemas.order import (
    OrderCreate,
    OrderItem,
    OrderListResponse,
    OrderResponse,
    OrderSummary,
)

logger = logging.getLogger(__name__)

INITIAL_STATUS = "Pending"
DEFAULT_UNIT_PRICE = 10.0

# Listings carry order summaries only
SUMMARY_PROJECTION = {"items": 0}


def order_total(items: Iterable[OrderItem], unit_price: float = DEFAULT_UNIT_PRICE) -> float:
    return sum(item.quantity * unit_price for item in items)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:00:00.123Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OrderService:
    def __init__(self, store: DocumentStore, unit_price: float = DEFAULT_UNIT_PRICE):
        self.store = store
        self.unit_price = unit_price

    async def list_orders(self, pagination: PaginationParams) -> OrderListResponse:
        """Newest orders first, windowed by page/size. No filtering."""
        total = await self.store.count()
        docs = await self.store.find(
            sort={"createdAt": -1},
            skip=pagination.skip,
            limit=pagination.size,
            projection=SUMMARY_PROJECTION,
        )
        return OrderListResponse(
            total=total,
            orders=[OrderSummary.model_validate(d) for d in normalize_ids(docs)],
        )

    async def get_order(self, order_id: str) -> OrderResponse:
        doc = await self.store.find_one({"_id": order_id})
        if doc is None:
            raise NotFoundError(resource="order", resource_id=order_id)
        return OrderResponse.model_validate(normalize_id(doc))

    async def create_order(self, order: OrderCreate) -> OrderResponse:
        new_order = {
            "customer": order.customer,
            "items": [item.model_dump(by_alias=True) for item in order.items],
            "totalAmount": order_total(order.items, self.unit_price),
            "status": INITIAL_STATUS,
            "createdAt": utc_timestamp(),
        }
        doc = await self.store.insert(new_order)
        logger.info(
            "Order created: %s customer=%s items=%d total=%.2f",
            doc["_id"], order.customer, len(order.items), new_order["totalAmount"],
        )
        return OrderResponse.model_validate(normalize_id(doc))

    async def delete_order(self, order_id: str) -> None:
        removed = await self.store.remove({"_id": order_id})
        if removed == 0:
            raise NotFoundError(resource="order", resource_id=order_id)
        logger.info("Order deleted: %s", order_id)
