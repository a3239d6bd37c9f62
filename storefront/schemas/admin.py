"""Schemas for admin-only endpoints (users, stats, product management)."""

from datetime import datetime

from pydantic import Field

from storefront.schemas.common import CamelModel


class AdminUserOut(CamelModel):
    id: int
    email: str
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime
    order_count: int


class StatsOut(CamelModel):
    total_users: int
    total_products: int
    total_orders: int
    pending_orders: int
    total_revenue: float = Field(..., description="Sum of order totals, cancelled excluded")


class ProductCreate(CamelModel):
    name: str = Field(default="", max_length=255)
    description: str | None = None
    price: float | None = None
    original_price: float | None = None
    stock: int = 0
    category_id: int | None = None
    images: list[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False
    is_sale_active: bool = True


class ProductPatch(CamelModel):
    """Partial product update; only these fields can be changed, unknown keys are ignored."""

    is_active: bool | None = None
    is_featured: bool | None = None
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = None
    original_price: float | None = None
    stock: int | None = None
    category_id: int | None = None
    images: list[str] | None = None
