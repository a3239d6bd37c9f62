"""
Address book operations scoped to one user.

Invariant: at most one address per user has is_default set. Every write that
makes an address default locks the owning user row, clears is_default on the
user's other addresses and sets it on the target, all in one transaction.
"""

import logging

from sqlalchemy.orm import Session

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import Address, Order, User
from storefront.models.base import as_utc
from storefront.schemas.address import AddressIn, AddressOut
from storefront.services.sanitize import sanitize_input

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "Turkey"
ADDRESS_NOT_FOUND = "Address not found"

_REQUIRED_FIELDS = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("address1", "Address"),
    ("city", "City"),
    ("postal_code", "Postal code"),
)


def format_address(address: Address) -> AddressOut:
    return AddressOut(
        id=address.id,
        type=address.type,
        first_name=address.first_name,
        last_name=address.last_name,
        company=address.company,
        address1=address.address1,
        address2=address.address2,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country=address.country,
        phone=address.phone,
        is_default=address.is_default,
        created_at=as_utc(address.created_at),
        updated_at=as_utc(address.updated_at),
    )


def _optional(value: str | None) -> str | None:
    """Sanitized value, or None when blank."""
    cleaned = sanitize_input(value)
    return cleaned or None


def address_fields(body) -> dict:
    """
    Sanitize address input and apply defaults: state falls back to city,
    country to Turkey, blank optional strings become None.
    Raises InputValidationError naming the first missing required field.
    """
    values = {name: sanitize_input(getattr(body, name)) for name, _ in _REQUIRED_FIELDS}
    for name, label in _REQUIRED_FIELDS:
        if not values[name]:
            raise InputValidationError(f"{label} is required")
    values["company"] = _optional(body.company)
    values["address2"] = _optional(body.address2)
    values["phone"] = _optional(body.phone)
    values["state"] = _optional(body.state) or values["city"]
    values["country"] = _optional(body.country) or DEFAULT_COUNTRY
    return values


def _lock_user(db: Session, user_id: int) -> None:
    """Serialize default-address writers for one user (no-op on SQLite)."""
    db.query(User.id).filter(User.id == user_id).with_for_update().one()


def _clear_other_defaults(db: Session, user_id: int, keep_id: int | None) -> None:
    query = db.query(Address).filter(
        Address.user_id == user_id, Address.is_default.is_(True)
    )
    if keep_id is not None:
        query = query.filter(Address.id != keep_id)
    query.update({Address.is_default: False}, synchronize_session=False)


def get_owned_address(db: Session, user_id: int, address_id: int) -> Address:
    """Address owned by user_id. Someone else's address is reported as missing."""
    address = (
        db.query(Address)
        .filter(Address.id == address_id, Address.user_id == user_id)
        .first()
    )
    if address is None:
        raise NotFoundError(ADDRESS_NOT_FOUND)
    return address


def list_addresses(db: Session, user_id: int) -> list[Address]:
    return (
        db.query(Address)
        .filter(Address.user_id == user_id)
        .order_by(Address.created_at.desc(), Address.id.desc())
        .all()
    )


def create_address(db: Session, user_id: int, body: AddressIn) -> Address:
    fields = address_fields(body)
    try:
        if body.is_default:
            _lock_user(db, user_id)
            _clear_other_defaults(db, user_id, keep_id=None)
        address = Address(
            user_id=user_id, type=body.type, is_default=body.is_default, **fields
        )
        db.add(address)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(address)
    logger.info(
        "Address created",
        extra={"user_id": user_id, "address_id": address.id, "is_default": address.is_default},
    )
    return address


def update_address(db: Session, user_id: int, address_id: int, body: AddressIn) -> Address:
    address = get_owned_address(db, user_id, address_id)
    fields = address_fields(body)
    try:
        if body.is_default:
            _lock_user(db, user_id)
            _clear_other_defaults(db, user_id, keep_id=address.id)
        for key, value in fields.items():
            setattr(address, key, value)
        address.type = body.type
        address.is_default = body.is_default
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(address)
    return address


def set_default_address(db: Session, user_id: int, address_id: int) -> Address:
    """Make address_id the user's only default address."""
    address = get_owned_address(db, user_id, address_id)
    try:
        _lock_user(db, user_id)
        _clear_other_defaults(db, user_id, keep_id=address.id)
        address.is_default = True
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(address)
    logger.info(
        "Default address changed", extra={"user_id": user_id, "address_id": address.id}
    )
    return address


def delete_address(db: Session, user_id: int, address_id: int) -> None:
    address = get_owned_address(db, user_id, address_id)
    in_use = (
        db.query(Order.id)
        .filter(
            (Order.shipping_address_id == address.id)
            | (Order.billing_address_id == address.id)
        )
        .first()
    )
    if in_use is not None:
        raise InputValidationError("This address is used by an order and cannot be deleted")
    db.delete(address)
    db.commit()
