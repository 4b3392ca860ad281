"""
Storefront Backend — Product Schemas
======================================

What:  Pydantic models for the /product endpoints: request bodies, query
       parameters and responses.
How:   Responses are frozen models built from normalized store documents,
       so `_id` and any stray stored fields never reach the client.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.schemas.common import PaginationParams

# sortBy is spliced into a JSON path, so only dotted identifiers are accepted
SORT_FIELD_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    name: str = Field(description="Product name")
    price: float = Field(ge=0, description="Unit price, non-negative")
    category: str = Field(description="Category used for exact-match filtering")
    description: Optional[str] = Field(default=None, description="Free-text description")

    model_config = {"allow_inf_nan": False}


class ProductUpdate(BaseModel):
    """
    Partial update body. Only fields present (and not null) in the request
    are written; unknown fields are rejected.
    """
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None

    model_config = {"extra": "forbid", "allow_inf_nan": False}

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProductQuery(PaginationParams):
    """Filtering, sorting and pagination for GET /product."""
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: str = Field(default="price", pattern=SORT_FIELD_PATTERN)
    order: Literal["asc", "desc"] = "asc"

    model_config = {"allow_inf_nan": False}

    @property
    def sort_direction(self) -> int:
        return 1 if self.order == "asc" else -1


class ProductSearchQuery(ProductQuery):
    """GET /product/search: ProductQuery plus a free-text term."""
    search: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    id: str = Field(description="Store-assigned product identifier")
    name: str
    price: float
    category: str
    description: Optional[str] = None

    model_config = {"frozen": True}


class ProductListResponse(BaseModel):
    total: int = Field(description="Number of matching products, ignoring pagination")
    products: List[ProductResponse] = Field(description="The requested page")
