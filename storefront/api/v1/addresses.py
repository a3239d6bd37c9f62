"""Address book endpoints. Every query is scoped to the caller."""

from fastapi import APIRouter, status

from storefront.api.deps import CurrentUser, DbSession
from storefront.schemas.address import AddressIn, AddressOut
from storefront.schemas.common import ListResponse, MessageResponse, SuccessResponse
from storefront.services import addresses
from storefront.services.addresses import format_address

router = APIRouter()


@router.get("", response_model=ListResponse[AddressOut])
def list_addresses(user: CurrentUser, db: DbSession) -> ListResponse[AddressOut]:
    """Caller's addresses, newest first."""
    items = [format_address(a) for a in addresses.list_addresses(db, user.id)]
    return ListResponse(data=items, count=len(items))


@router.post("", response_model=SuccessResponse[AddressOut], status_code=status.HTTP_201_CREATED)
def create_address(
    body: AddressIn, user: CurrentUser, db: DbSession
) -> SuccessResponse[AddressOut]:
    address = addresses.create_address(db, user.id, body)
    return SuccessResponse(message="Address added", data=format_address(address))


@router.get("/{address_id}", response_model=SuccessResponse[AddressOut])
def get_address(
    address_id: int, user: CurrentUser, db: DbSession
) -> SuccessResponse[AddressOut]:
    address = addresses.get_owned_address(db, user.id, address_id)
    return SuccessResponse(data=format_address(address))


@router.put("/{address_id}", response_model=SuccessResponse[AddressOut])
def update_address(
    address_id: int, body: AddressIn, user: CurrentUser, db: DbSession
) -> SuccessResponse[AddressOut]:
    address = addresses.update_address(db, user.id, address_id, body)
    return SuccessResponse(message="Address updated", data=format_address(address))


@router.put("/{address_id}/default", response_model=SuccessResponse[AddressOut])
def set_default_address(
    address_id: int, user: CurrentUser, db: DbSession
) -> SuccessResponse[AddressOut]:
    address = addresses.set_default_address(db, user.id, address_id)
    return SuccessResponse(message="Default address updated", data=format_address(address))


@router.delete("/{address_id}", response_model=MessageResponse)
def delete_address(address_id: int, user: CurrentUser, db: DbSession) -> MessageResponse:
    addresses.delete_address(db, user.id, address_id)
    return MessageResponse(message="Address deleted")
