"""Back-office operations: all users' orders, users, stats, product management."""

import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import (
    CartItem,
    Category,
    Discount,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Review,
    User,
)
from storefront.models.base import as_utc
from storefront.schemas.admin import AdminUserOut, ProductCreate, ProductPatch, StatsOut
from storefront.services.catalog import PRODUCT_NOT_FOUND, product_query, unique_slug
from storefront.services.orders import ORDER_NOT_FOUND, order_query
from storefront.services.sanitize import sanitize_input

logger = logging.getLogger(__name__)

ORDER_STATUSES = tuple(s.value for s in OrderStatus)


# --- Orders ---


def list_all_orders(db: Session, status: str | None = None) -> list[Order]:
    query = order_query(db)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(db: Session, order_id: int) -> Order:
    order = order_query(db).filter(Order.id == order_id).first()
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return order


def update_order_status(db: Session, order_id: int, status: str) -> Order:
    if status not in ORDER_STATUSES:
        raise InputValidationError(
            f"Invalid order status; expected one of {', '.join(ORDER_STATUSES)}"
        )
    order = get_order(db, order_id)
    previous = order.status
    order.status = status
    db.commit()
    logger.info(
        "Order status updated",
        extra={"order_id": order.id, "from_status": previous, "to_status": status},
    )
    return get_order(db, order_id)


# --- Users ---


def list_users(db: Session) -> list[AdminUserOut]:
    order_counts = dict(
        db.query(Order.user_id, func.count(Order.id)).group_by(Order.user_id).all()
    )
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [
        AdminUserOut(
            id=u.id,
            email=u.email,
            name=u.name,
            first_name=u.first_name,
            last_name=u.last_name,
            role=u.role,
            created_at=as_utc(u.created_at),
            order_count=order_counts.get(u.id, 0),
        )
        for u in users
    ]


def get_stats(db: Session) -> StatsOut:
    revenue = (
        db.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.status != OrderStatus.CANCELLED.value)
        .scalar()
    )
    return StatsOut(
        total_users=db.query(func.count(User.id)).scalar() or 0,
        total_products=db.query(func.count(Product.id)).scalar() or 0,
        total_orders=db.query(func.count(Order.id)).scalar() or 0,
        pending_orders=(
            db.query(func.count(Order.id))
            .filter(Order.status == OrderStatus.PENDING.value)
            .scalar()
            or 0
        ),
        total_revenue=float(Decimal(str(revenue or 0))),
    )


# --- Products ---


def list_all_products(db: Session) -> list[Product]:
    """Every product, inactive included."""
    return product_query(db).order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


def _require_category(db: Session, category_id: int) -> None:
    if db.query(Category.id).filter(Category.id == category_id).first() is None:
        raise InputValidationError("Category not found")


def _check_price(price: float | None, field: str = "Price") -> None:
    if price is None or price <= 0:
        raise InputValidationError(f"{field} must be greater than zero")


def create_product(db: Session, body: ProductCreate) -> Product:
    name = sanitize_input(body.name)
    if not name or body.category_id is None or body.price is None:
        raise InputValidationError("Name, category and price are required")
    _check_price(body.price)
    if body.original_price is not None:
        _check_price(body.original_price, "Original price")
    if body.stock < 0:
        raise InputValidationError("Stock cannot be negative")
    _require_category(db, body.category_id)

    product = Product(
        name=name,
        slug=unique_slug(db, Product, name, fallback="product"),
        description=sanitize_input(body.description) or None,
        price=Decimal(str(body.price)),
        original_price=(
            Decimal(str(body.original_price)) if body.original_price is not None else None
        ),
        stock=body.stock,
        category_id=body.category_id,
        images=[i.strip() for i in body.images if i and i.strip()],
        is_active=body.is_active,
        is_featured=body.is_featured,
        is_sale_active=body.is_sale_active,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product created", extra={"product_id": product.id, "slug": product.slug})
    return product


def update_product(db: Session, product_id: int, body: ProductPatch) -> Product:
    """Apply the fields present in body; renaming regenerates the slug."""
    product = get_product(db, product_id)
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise InputValidationError("No updatable fields provided")

    if "name" in changes:
        name = sanitize_input(changes["name"])
        if not name:
            raise InputValidationError("Product name cannot be empty")
        if name != product.name:
            product.slug = unique_slug(
                db, Product, name, fallback="product", exclude_id=product.id
            )
        product.name = name
    if "description" in changes:
        product.description = sanitize_input(changes["description"]) or None
    if "price" in changes:
        _check_price(changes["price"])
        product.price = Decimal(str(changes["price"]))
    if "original_price" in changes:
        if changes["original_price"] is None:
            product.original_price = None
        else:
            _check_price(changes["original_price"], "Original price")
            product.original_price = Decimal(str(changes["original_price"]))
    if "stock" in changes:
        if changes["stock"] is None or changes["stock"] < 0:
            raise InputValidationError("Stock cannot be negative")
        product.stock = changes["stock"]
    if "category_id" in changes:
        if changes["category_id"] is None:
            raise InputValidationError("Category is required")
        _require_category(db, changes["category_id"])
        product.category_id = changes["category_id"]
    if "images" in changes:
        product.images = [i.strip() for i in changes["images"] or [] if i and i.strip()]
    for flag in ("is_active", "is_featured"):
        if flag in changes:
            if changes[flag] is None:
                raise InputValidationError(f"{flag} must be true or false")
            setattr(product, flag, changes[flag])

    db.commit()
    db.refresh(product)
    logger.info(
        "Product updated",
        extra={"product_id": product.id, "fields": sorted(changes)},
    )
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Delete a product with its cart lines, order lines, reviews and discounts."""
    product = get_product(db, product_id)
    try:
        for model in (CartItem, OrderItem, Review, Discount):
            db.query(model).filter(model.product_id == product.id).delete(
                synchronize_session=False
            )
        db.delete(product)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Product deleted", extra={"product_id": product_id})
