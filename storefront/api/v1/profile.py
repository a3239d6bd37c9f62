"""Profile and password updates for the signed-in user."""

from fastapi import APIRouter

from storefront.api.deps import CurrentUser, DbSession
from storefront.schemas.auth import PasswordChangeRequest, ProfileUpdateRequest, UserOut
from storefront.schemas.common import MessageResponse, SuccessResponse
from storefront.services import accounts

router = APIRouter()


@router.put("", response_model=SuccessResponse[UserOut])
def update_profile(
    body: ProfileUpdateRequest, user: CurrentUser, db: DbSession
) -> SuccessResponse[UserOut]:
    updated = accounts.update_profile(
        db,
        user,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
    )
    return SuccessResponse(
        message="Profile updated", data=accounts.format_user(updated)
    )


@router.put("/password", response_model=MessageResponse)
def change_password(
    body: PasswordChangeRequest, user: CurrentUser, db: DbSession
) -> MessageResponse:
    accounts.change_password(
        db,
        user,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return MessageResponse(message="Password changed")
