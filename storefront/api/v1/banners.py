"""Banner endpoints: public active list, admin management."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from storefront.api.deps import AdminUser, DbSession
from storefront.schemas.banner import BannerIn, BannerOut
from storefront.schemas.common import ListResponse, MessageResponse, SuccessResponse
from storefront.services import banners
from storefront.services.banners import format_banner

router = APIRouter()


@router.get("/active", response_model=ListResponse[BannerOut])
def list_active_banners(
    db: DbSession,
    banner_type: Annotated[str | None, Query(alias="type", max_length=32)] = None,
) -> ListResponse[BannerOut]:
    """Banners that are active and inside their start/end window, by display order."""
    data = [format_banner(b) for b in banners.list_active_banners(db, banner_type)]
    return ListResponse(data=data, count=len(data))


@router.get("", response_model=ListResponse[BannerOut])
def list_banners(_admin: AdminUser, db: DbSession) -> ListResponse[BannerOut]:
    data = [format_banner(b) for b in banners.list_banners(db)]
    return ListResponse(data=data, count=len(data))


@router.get("/{banner_id}", response_model=SuccessResponse[BannerOut])
def get_banner(banner_id: int, _admin: AdminUser, db: DbSession) -> SuccessResponse[BannerOut]:
    return SuccessResponse(data=format_banner(banners.get_banner(db, banner_id)))


@router.post("", response_model=SuccessResponse[BannerOut], status_code=status.HTTP_201_CREATED)
def create_banner(
    body: BannerIn, _admin: AdminUser, db: DbSession
) -> SuccessResponse[BannerOut]:
    banner = banners.create_banner(db, body)
    return SuccessResponse(message="Banner created", data=format_banner(banner))


@router.put("/{banner_id}", response_model=SuccessResponse[BannerOut])
def update_banner(
    banner_id: int, body: BannerIn, _admin: AdminUser, db: DbSession
) -> SuccessResponse[BannerOut]:
    banner = banners.update_banner(db, banner_id, body)
    return SuccessResponse(message="Banner updated", data=format_banner(banner))


@router.delete("/{banner_id}", response_model=MessageResponse)
def delete_banner(banner_id: int, _admin: AdminUser, db: DbSession) -> MessageResponse:
    banners.delete_banner(db, banner_id)
    return MessageResponse(message="Banner deleted")
