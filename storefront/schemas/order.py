"""Schemas for checkout and order history."""

from datetime import datetime

from pydantic import Field

from storefront.schemas.address import AddressOut
from storefront.schemas.common import CamelModel


class ShippingInfo(CamelModel):
    """Address captured at checkout; stored as a new address row."""

    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    address1: str | None = Field(default=None, max_length=512)
    address2: str | None = Field(default=None, max_length=512)
    city: str | None = Field(default=None, max_length=255)
    state: str | None = Field(default=None, max_length=255)
    postal_code: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)


class CreateOrderRequest(CamelModel):
    shipping_info: ShippingInfo
    payment_method: str = Field(default="CREDIT_CARD", max_length=64)
    notes: str | None = Field(default=None, max_length=2000)


class OrderItemOut(CamelModel):
    id: int
    product_id: int
    product_name: str
    product_slug: str
    image: str | None = None
    quantity: int
    price: float
    total: float


class OrderUser(CamelModel):
    id: int
    email: str
    name: str | None = None


class OrderOut(CamelModel):
    id: int
    order_number: str
    status: str
    payment_status: str
    payment_method: str
    total_amount: float
    notes: str | None = None
    item_count: int
    items: list[OrderItemOut]
    shipping_address: AddressOut | None = None
    billing_address: AddressOut | None = None
    created_at: datetime
    updated_at: datetime


class AdminOrderOut(OrderOut):
    user: OrderUser


class OrderStatusUpdate(CamelModel):
    status: str = Field(default="", max_length=32)
