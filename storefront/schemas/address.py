"""Request/response schemas for the address book."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from storefront.schemas.common import CamelModel

AddressType = Literal["SHIPPING", "BILLING"]


class AddressIn(CamelModel):
    """
    Address create/update body. Required fields are checked by the service so
    blank strings and missing keys get the same message.
    """

    type: AddressType = "SHIPPING"
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    address1: str | None = Field(default=None, max_length=512)
    address2: str | None = Field(default=None, max_length=512)
    city: str | None = Field(default=None, max_length=255)
    state: str | None = Field(default=None, max_length=255)
    postal_code: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    is_default: bool = False


class AddressOut(CamelModel):
    id: int
    type: str
    first_name: str
    last_name: str
    company: str | None = None
    address1: str
    address2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str | None = None
    is_default: bool
    created_at: datetime
    updated_at: datetime
