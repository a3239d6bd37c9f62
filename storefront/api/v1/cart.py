"""Shopping cart endpoints for the signed-in user."""

from fastapi import APIRouter

from storefront.api.deps import CurrentUser, DbSession
from storefront.schemas.cart import CartAddRequest, CartOut, CartUpdateRequest
from storefront.schemas.common import MessageResponse, SuccessResponse
from storefront.services import cart

router = APIRouter()


@router.get("", response_model=SuccessResponse[CartOut])
def get_cart(user: CurrentUser, db: DbSession) -> SuccessResponse[CartOut]:
    return SuccessResponse(data=cart.get_cart(db, user.id))


@router.post("", response_model=SuccessResponse[CartOut])
def add_to_cart(
    body: CartAddRequest, user: CurrentUser, db: DbSession
) -> SuccessResponse[CartOut]:
    cart.add_to_cart(db, user.id, body.product_id, body.quantity)
    return SuccessResponse(message="Added to cart", data=cart.get_cart(db, user.id))


@router.put("/{item_id}", response_model=SuccessResponse[CartOut])
def update_cart_item(
    item_id: int, body: CartUpdateRequest, user: CurrentUser, db: DbSession
) -> SuccessResponse[CartOut]:
    cart.update_cart_item(db, user.id, item_id, body.quantity)
    return SuccessResponse(message="Cart updated", data=cart.get_cart(db, user.id))


@router.delete("/{item_id}", response_model=MessageResponse)
def remove_cart_item(item_id: int, user: CurrentUser, db: DbSession) -> MessageResponse:
    cart.remove_cart_item(db, user.id, item_id)
    return MessageResponse(message="Removed from cart")
