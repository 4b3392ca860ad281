"""
Storefront Backend — Order Schemas
====================================

What:  Pydantic models for the /orders endpoints.
How:   Wire names are camelCase (productId, totalAmount, createdAt) and the
       documents are stored under the same names; Python attributes are
       snake_case through aliases.
"""

from typing import List

from pydantic import BaseModel, Field

_ALIASED = {"populate_by_name": True}


class OrderItem(BaseModel):
    product_id: str = Field(alias="productId", description="Referenced product (not validated)")
    quantity: int = Field(gt=0, description="Number of units, positive")

    model_config = {**_ALIASED, "frozen": True}


class OrderCreate(BaseModel):
    customer: str = Field(description="Customer name or reference")
    items: List[OrderItem] = Field(description="Ordered line items")

    model_config = _ALIASED


class OrderSummary(BaseModel):
    """Order as shown in listings (line items omitted)."""
    id: str
    customer: str
    total_amount: float = Field(alias="totalAmount")
    status: str
    created_at: str = Field(alias="createdAt", description="ISO-8601 UTC timestamp")

    model_config = {**_ALIASED, "frozen": True}


class OrderResponse(OrderSummary):
    items: List[OrderItem]


class OrderListResponse(BaseModel):
    total: int = Field(description="Number of stored orders")
    orders: List[OrderSummary] = Field(description="The requested page, newest first")
