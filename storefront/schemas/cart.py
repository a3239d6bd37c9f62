"""Schemas for the shopping cart."""

from pydantic import Field

from storefront.schemas.catalog import ProductOut
from storefront.schemas.common import CamelModel


class CartAddRequest(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1, le=999)


class CartUpdateRequest(CamelModel):
    quantity: int = Field(..., ge=1, le=999)


class CartItemOut(CamelModel):
    id: int
    product_id: int
    quantity: int
    line_total: float
    product: ProductOut


class CartOut(CamelModel):
    items: list[CartItemOut]
    total_amount: float
    total_items: int
