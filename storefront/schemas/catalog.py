"""Schemas for products, categories and reviews."""

from datetime import datetime

from pydantic import Field

from storefront.schemas.common import CamelModel


class CategoryRef(CamelModel):
    id: int
    name: str
    slug: str


class DiscountOut(CamelModel):
    percentage: float
    badge_text: str | None = None
    badge_color: str | None = None


class ProductOut(CamelModel):
    """Catalog listing entry with derived rating, discount and isNew."""

    id: int
    name: str
    slug: str
    description: str | None = None
    price: float
    original_price: float | None = None
    images: list[str] = Field(default_factory=list)
    stock: int
    is_active: bool
    is_featured: bool
    is_sale_active: bool
    category: CategoryRef | None = None
    rating: float = Field(..., ge=0, le=5, description="Average review rating, 1 decimal")
    reviews: int = Field(..., ge=0, description="Number of reviews")
    discount: DiscountOut | None = None
    is_new: bool
    created_at: datetime


class ReviewOut(CamelModel):
    id: int
    rating: int
    comment: str | None = None
    user_name: str | None = None
    created_at: datetime


class ProductDetail(ProductOut):
    reviews_list: list[ReviewOut] = Field(default_factory=list)


class SubcategoryOut(CamelModel):
    id: int
    name: str
    slug: str
    display_order: int
    product_count: int


class CategoryOut(CamelModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    image: str | None = None
    parent_id: int | None = None
    display_order: int
    is_active: bool
    product_count: int
    subcategories: list[SubcategoryOut] = Field(default_factory=list)
    parent: CategoryRef | None = None


class CategoryIn(CamelModel):
    name: str = Field(default="", max_length=255)
    description: str | None = None
    image: str | None = Field(default=None, max_length=1024)
    parent_id: int | None = None
    display_order: int = 0
    is_active: bool = True
