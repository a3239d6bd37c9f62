"""Shopping cart lines for one user."""

from decimal import Decimal

from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import CartItem, Product
from storefront.schemas.cart import CartItemOut, CartOut
from storefront.services.catalog import PRODUCT_NOT_FOUND, format_product

CART_ITEM_NOT_FOUND = "Cart item not found"


def cart_lines(db: Session, user_id: int) -> list[CartItem]:
    return (
        db.query(CartItem)
        .options(
            selectinload(CartItem.product).selectinload(Product.category),
            selectinload(CartItem.product).selectinload(Product.discounts),
            selectinload(CartItem.product).selectinload(Product.reviews),
        )
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.asc(), CartItem.id.asc())
        .all()
    )


def cart_total(items: list[CartItem]) -> Decimal:
    return sum((Decimal(item.product.price) * item.quantity for item in items), Decimal("0"))


def get_cart(db: Session, user_id: int) -> CartOut:
    items = cart_lines(db, user_id)
    return CartOut(
        items=[
            CartItemOut(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                line_total=float(Decimal(item.product.price) * item.quantity),
                product=format_product(item.product),
            )
            for item in items
        ],
        total_amount=float(cart_total(items)),
        total_items=sum(item.quantity for item in items),
    )


def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int) -> CartItem:
    """Add quantity of a product; an existing line for the product is incremented."""
    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    if not product.is_active or not product.is_sale_active:
        raise InputValidationError("This product is not available for sale")

    item = (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .first()
    )
    if item is None:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        db.add(item)
    else:
        item.quantity = item.quantity + quantity
    db.commit()
    db.refresh(item)
    return item


def _owned_item(db: Session, user_id: int, item_id: int) -> CartItem:
    item = (
        db.query(CartItem)
        .filter(CartItem.id == item_id, CartItem.user_id == user_id)
        .first()
    )
    if item is None:
        raise NotFoundError(CART_ITEM_NOT_FOUND)
    return item


def update_cart_item(db: Session, user_id: int, item_id: int, quantity: int) -> CartItem:
    item = _owned_item(db, user_id, item_id)
    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_cart_item(db: Session, user_id: int, item_id: int) -> None:
    item = _owned_item(db, user_id, item_id)
    db.delete(item)
    db.commit()
