"""Admin dashboard: all orders, users, stats and product management. ADMIN only."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from storefront.api.deps import AdminUser, DbSession
from storefront.schemas.admin import AdminUserOut, ProductCreate, ProductPatch, StatsOut
from storefront.schemas.catalog import ProductOut
from storefront.schemas.common import ListResponse, MessageResponse, SuccessResponse
from storefront.schemas.order import AdminOrderOut, OrderStatusUpdate
from storefront.services import admin
from storefront.services.catalog import format_product
from storefront.services.orders import format_admin_order

router = APIRouter()


@router.get("/orders", response_model=ListResponse[AdminOrderOut])
def list_orders(
    _admin: AdminUser,
    db: DbSession,
    order_status: Annotated[str | None, Query(alias="status", max_length=32)] = None,
) -> ListResponse[AdminOrderOut]:
    data = [format_admin_order(o) for o in admin.list_all_orders(db, order_status)]
    return ListResponse(data=data, count=len(data))


@router.get("/orders/{order_id}", response_model=SuccessResponse[AdminOrderOut])
def get_order(order_id: int, _admin: AdminUser, db: DbSession) -> SuccessResponse[AdminOrderOut]:
    return SuccessResponse(data=format_admin_order(admin.get_order(db, order_id)))


@router.patch("/orders/{order_id}", response_model=SuccessResponse[AdminOrderOut])
def update_order_status(
    order_id: int, body: OrderStatusUpdate, _admin: AdminUser, db: DbSession
) -> SuccessResponse[AdminOrderOut]:
    order = admin.update_order_status(db, order_id, body.status)
    return SuccessResponse(message="Order status updated", data=format_admin_order(order))


@router.get("/users", response_model=ListResponse[AdminUserOut])
def list_users(_admin: AdminUser, db: DbSession) -> ListResponse[AdminUserOut]:
    data = admin.list_users(db)
    return ListResponse(data=data, count=len(data))


@router.get("/stats", response_model=SuccessResponse[StatsOut])
def get_stats(_admin: AdminUser, db: DbSession) -> SuccessResponse[StatsOut]:
    return SuccessResponse(data=admin.get_stats(db))


@router.get("/products", response_model=ListResponse[ProductOut])
def list_products(_admin: AdminUser, db: DbSession) -> ListResponse[ProductOut]:
    data = [format_product(p) for p in admin.list_all_products(db)]
    return ListResponse(data=data, count=len(data))


@router.post(
    "/products",
    response_model=SuccessResponse[ProductOut],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    body: ProductCreate, _admin: AdminUser, db: DbSession
) -> SuccessResponse[ProductOut]:
    product = admin.create_product(db, body)
    return SuccessResponse(message="Product created", data=format_product(product))


@router.get("/products/{product_id}", response_model=SuccessResponse[ProductOut])
def get_product(product_id: int, _admin: AdminUser, db: DbSession) -> SuccessResponse[ProductOut]:
    return SuccessResponse(data=format_product(admin.get_product(db, product_id)))


@router.patch("/products/{product_id}", response_model=SuccessResponse[ProductOut])
def update_product(
    product_id: int, body: ProductPatch, _admin: AdminUser, db: DbSession
) -> SuccessResponse[ProductOut]:
    product = admin.update_product(db, product_id, body)
    return SuccessResponse(message="Product updated", data=format_product(product))


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, _admin: AdminUser, db: DbSession) -> MessageResponse:
    admin.delete_product(db, product_id)
    return MessageResponse(message="Product deleted")
