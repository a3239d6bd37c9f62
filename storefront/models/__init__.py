"""SQLAlchemy ORM models."""

from storefront.models.address import Address
from storefront.models.banner import BANNER_TYPES, Banner
from storefront.models.base import Base
from storefront.models.cart import CartItem
from storefront.models.catalog import Category, Discount, Product, Review
from storefront.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from storefront.models.user import Role, User

__all__ = [
    "Address",
    "BANNER_TYPES",
    "Banner",
    "Base",
    "CartItem",
    "Category",
    "Discount",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Product",
    "Review",
    "Role",
    "User",
]
