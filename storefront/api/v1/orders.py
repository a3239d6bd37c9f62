"""Checkout and order history for the signed-in user."""

from fastapi import APIRouter, status

from storefront.api.deps import AppSettings, CurrentUser, DbSession
from storefront.schemas.common import ListResponse, SuccessResponse
from storefront.schemas.order import CreateOrderRequest, OrderOut
from storefront.services import orders

router = APIRouter()


@router.post("", response_model=SuccessResponse[OrderOut], status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest, user: CurrentUser, db: DbSession, settings: AppSettings
) -> SuccessResponse[OrderOut]:
    """Place an order for everything in the cart; the cart is emptied."""
    order = orders.create_order(db, user.id, body, settings.ORDER_NUMBER_PREFIX)
    return SuccessResponse(message="Order created", data=orders.format_order(order))


@router.get("", response_model=ListResponse[OrderOut])
def list_orders(user: CurrentUser, db: DbSession) -> ListResponse[OrderOut]:
    data = [orders.format_order(o) for o in orders.list_user_orders(db, user.id)]
    return ListResponse(data=data, count=len(data))


@router.get("/{order_id}", response_model=SuccessResponse[OrderOut])
def get_order(order_id: int, user: CurrentUser, db: DbSession) -> SuccessResponse[OrderOut]:
    order = orders.get_user_order(db, user.id, order_id)
    return SuccessResponse(data=orders.format_order(order))
