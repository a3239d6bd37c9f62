"""Category listing (public) and management (admin)."""

from fastapi import APIRouter, status

from storefront.api.deps import AdminUser, DbSession
from storefront.schemas.catalog import CategoryIn, CategoryOut
from storefront.schemas.common import ListResponse, MessageResponse, SuccessResponse
from storefront.services import catalog

router = APIRouter()


@router.get("", response_model=ListResponse[CategoryOut])
def list_categories(db: DbSession) -> ListResponse[CategoryOut]:
    """All categories by name, with active subcategories and active product counts."""
    data = catalog.list_categories(db)
    return ListResponse(data=data, count=len(data))


@router.get("/{category_id}", response_model=SuccessResponse[CategoryOut])
def get_category(category_id: int, db: DbSession) -> SuccessResponse[CategoryOut]:
    return SuccessResponse(data=catalog.get_category(db, category_id))


@router.post("", response_model=SuccessResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryIn, _admin: AdminUser, db: DbSession
) -> SuccessResponse[CategoryOut]:
    return SuccessResponse(
        message="Category created", data=catalog.create_category(db, body)
    )


@router.put("/{category_id}", response_model=SuccessResponse[CategoryOut])
def update_category(
    category_id: int, body: CategoryIn, _admin: AdminUser, db: DbSession
) -> SuccessResponse[CategoryOut]:
    return SuccessResponse(
        message="Category updated", data=catalog.update_category(db, category_id, body)
    )


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, _admin: AdminUser, db: DbSession) -> MessageResponse:
    catalog.delete_category(db, category_id)
    return MessageResponse(message="Category deleted")
