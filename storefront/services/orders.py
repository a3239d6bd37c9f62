"""Checkout and order history."""

import logging
import random
import time
from decimal import Decimal

from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import (
    Address,
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
)
from storefront.models.base import as_utc
from storefront.schemas.order import (
    AdminOrderOut,
    CreateOrderRequest,
    OrderItemOut,
    OrderOut,
    OrderUser,
)
from storefront.services.addresses import address_fields, format_address
from storefront.services.cart import cart_lines, cart_total

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "Order not found"


def generate_order_number(prefix: str) -> str:
    """<prefix><epoch ms><0-999>, e.g. MSE1718000000000123."""
    return f"{prefix}{int(time.time() * 1000)}{random.randint(0, 999)}"


def _format_item(item: OrderItem) -> OrderItemOut:
    product = item.product
    images = list(product.images or []) if product is not None else []
    price = Decimal(item.price)
    return OrderItemOut(
        id=item.id,
        product_id=item.product_id,
        product_name=product.name if product is not None else "",
        product_slug=product.slug if product is not None else "",
        image=images[0] if images else None,
        quantity=item.quantity,
        price=float(price),
        total=float(price * item.quantity),
    )


def _order_fields(order: Order) -> dict:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "total_amount": float(order.total_amount),
        "notes": order.notes,
        "item_count": sum(item.quantity for item in order.items),
        "items": [_format_item(item) for item in order.items],
        "shipping_address": (
            format_address(order.shipping_address) if order.shipping_address else None
        ),
        "billing_address": (
            format_address(order.billing_address) if order.billing_address else None
        ),
        "created_at": as_utc(order.created_at),
        "updated_at": as_utc(order.updated_at),
    }


def format_order(order: Order) -> OrderOut:
    return OrderOut(**_order_fields(order))


def format_admin_order(order: Order) -> AdminOrderOut:
    return AdminOrderOut(
        **_order_fields(order),
        user=OrderUser(id=order.user.id, email=order.user.email, name=order.user.name),
    )


def order_query(db: Session):
    return db.query(Order).options(
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.shipping_address),
        selectinload(Order.billing_address),
        selectinload(Order.user),
    )


def create_order(
    db: Session, user_id: int, body: CreateOrderRequest, order_number_prefix: str
) -> Order:
    """
    Turn the caller's cart into an order: store the shipping address (reused as
    billing address), snapshot line prices, empty the cart. One transaction.
    """
    items = cart_lines(db, user_id)
    if not items:
        raise InputValidationError("Your cart is empty")
    for item in items:
        product: Product = item.product
        if not product.is_active or not product.is_sale_active:
            raise InputValidationError(f"{product.name} is no longer available for sale")

    fields = address_fields(body.shipping_info)
    payment_method = (body.payment_method or "CREDIT_CARD").strip() or "CREDIT_CARD"
    try:
        address = Address(user_id=user_id, type="SHIPPING", is_default=False, **fields)
        db.add(address)
        db.flush()

        order = Order(
            user_id=user_id,
            order_number=generate_order_number(order_number_prefix),
            total_amount=cart_total(items),
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method,
            shipping_address_id=address.id,
            billing_address_id=address.id,
            notes=(body.notes or None),
        )
        order.items = [
            OrderItem(
                product_id=item.product_id,
                quantity=item.quantity,
                price=Decimal(item.product.price),
            )
            for item in items
        ]
        db.add(order)
        db.query(CartItem).filter(CartItem.user_id == user_id).delete(
            synchronize_session=False
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Order created",
        extra={
            "user_id": user_id,
            "order_id": order.id,
            "order_number": order.order_number,
            "total_amount": str(order.total_amount),
        },
    )
    return get_user_order(db, user_id, order.id)


def list_user_orders(db: Session, user_id: int) -> list[Order]:
    return (
        order_query(db)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_user_order(db: Session, user_id: int, order_id: int) -> Order:
    order = (
        order_query(db)
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return order
