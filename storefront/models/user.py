"""ORM model for storefront accounts (auth and RBAC)."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from storefront.models.base import Base, utcnow


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """
    Customer or admin account.

    email is stored lowercased and stripped; role is 'USER' or 'ADMIN'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(254), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    addresses = relationship(
        "Address", back_populates="user", cascade="all, delete-orphan"
    )
    orders = relationship("Order", back_populates="user")
    cart_items = relationship(
        "CartItem", back_populates="user", cascade="all, delete-orphan"
    )
