"""
Storefront Backend — Order Service Unit Tests
===============================================

What:  Tests for OrderService creation, listing, retrieval and deletion.
How:   Uses a real orders collection in tmp_path.

What we test:
    ✅ totalAmount = Σ quantity × unit price, status Pending, createdAt stamped
    ✅ Listing is newest first and omits line items
    ✅ Missing orders raise NotFoundError
"""

import re
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.exceptions import NotFoundError
from storefront.schemas.common import MAX_PAGE, MAX_PAGE_SIZE, PaginationParams
from storefront.schemas.order import OrderCreate, OrderItem
from storefront.services.order_service import OrderService, order_total, utc_timestamp

ISO_MILLIS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _order(customer="Ann", quantities=(2, 3)):
    return OrderCreate(
        customer=customer,
        items=[OrderItem(productId=f"p{i}", quantity=q) for i, q in enumerate(quantities)],
    )


class TestHelpers:
    def test_order_total(self):
        items = [OrderItem(productId="a", quantity=2), OrderItem(productId="b", quantity=3)]
        assert order_total(items) == 50

    def test_order_total_custom_price(self):
        assert order_total([OrderItem(productId="a", quantity=4)], unit_price=2.5) == 10

    def test_order_total_no_items(self):
        assert order_total([]) == 0

    def test_timestamp_format(self):
        assert ISO_MILLIS.match(utc_timestamp())


class TestPaginationBounds:
    def test_largest_window_accepted(self):
        params = PaginationParams(page=MAX_PAGE, size=MAX_PAGE_SIZE)
        assert params.skip == (MAX_PAGE - 1) * MAX_PAGE_SIZE
        assert params.skip < 2 ** 63

    @pytest.mark.parametrize("kwargs", [
        {"page": MAX_PAGE + 1},
        {"size": MAX_PAGE_SIZE + 1},
        {"page": 10 ** 19},
    ])
    def test_oversized_rejected(self, kwargs):
        with pytest.raises(PydanticValidationError):
            PaginationParams(**kwargs)


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_server_fields(self, orders_store):
        service = OrderService(orders_store)

        order = await service.create_order(_order())

        assert order.total_amount == 50
        assert order.status == "Pending"
        assert ISO_MILLIS.match(order.created_at)
        assert [item.quantity for item in order.items] == [2, 3]

    @pytest.mark.asyncio
    async def test_stored_with_camel_case_fields(self, orders_store):
        service = OrderService(orders_store)
        order = await service.create_order(_order(quantities=(1,)))

        doc = await orders_store.find_one({"_id": order.id})

        assert doc["totalAmount"] == 10
        assert doc["items"] == [{"productId": "p0", "quantity": 1}]
        assert "total_amount" not in doc

    @pytest.mark.asyncio
    async def test_configured_unit_price(self, orders_store):
        service = OrderService(orders_store, unit_price=7)
        order = await service.create_order(_order(quantities=(3,)))
        assert order.total_amount == 21

    @pytest.mark.asyncio
    async def test_get_round_trip(self, orders_store):
        service = OrderService(orders_store)
        created = await service.create_order(_order())
        assert await service.get_order(created.id) == created


class TestListOrders:
    @pytest.mark.asyncio
    async def test_newest_first(self, orders_store):
        for customer, stamp in [("old", "2024-01-01T00:00:00.000Z"),
                                ("new", "2024-03-01T00:00:00.000Z"),
                                ("mid", "2024-02-01T00:00:00.000Z")]:
            await orders_store.insert({
                "customer": customer,
                "items": [],
                "totalAmount": 0,
                "status": "Pending",
                "createdAt": stamp,
            })
        service = OrderService(orders_store)

        result = await service.list_orders(PaginationParams())

        assert result.total == 3
        assert [o.customer for o in result.orders] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_created_orders_newest_first(self, orders_store):
        service = OrderService(orders_store)
        stamps = iter(["2024-01-01T00:00:00.000Z", "2024-01-02T00:00:00.000Z"])
        with patch("storefront.services.order_service.utc_timestamp", side_effect=lambda: next(stamps)):
            first = await service.create_order(_order("first"))
            second = await service.create_order(_order("second"))

        result = await service.list_orders(PaginationParams())

        assert [o.id for o in result.orders] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_listing_omits_items(self, orders_store):
        service = OrderService(orders_store)
        await service.create_order(_order())

        result = await service.list_orders(PaginationParams())

        dumped = result.model_dump(by_alias=True)
        assert "items" not in dumped["orders"][0]
        assert dumped["orders"][0]["totalAmount"] == 50

    @pytest.mark.asyncio
    async def test_pagination(self, orders_store):
        service = OrderService(orders_store)
        for i in range(5):
            await service.create_order(_order(f"c{i}", quantities=(1,)))

        result = await service.list_orders(PaginationParams(page=2, size=2))

        assert result.total == 5
        assert len(result.orders) == 2


class TestGetAndDelete:
    @pytest.mark.asyncio
    async def test_get_missing(self, orders_store):
        with pytest.raises(NotFoundError, match="Order with ID 'nope' was not found"):
            await OrderService(orders_store).get_order("nope")

    @pytest.mark.asyncio
    async def test_delete(self, orders_store):
        service = OrderService(orders_store)
        created = await service.create_order(_order())

        await service.delete_order(created.id)

        assert await orders_store.count() == 0

    @pytest.mark.asyncio
    async def test_delete_missing(self, orders_store):
        service = OrderService(orders_store)
        await service.create_order(_order())

        with pytest.raises(NotFoundError):
            await service.delete_order("nope")
        assert await orders_store.count() == 1
