"""ORM model for address book entries."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from storefront.models.base import Base, utcnow


class Address(Base):
    """
    Shipping or billing address owned by exactly one user.

    At most one address per user has is_default set; see services.addresses.
    """

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(16), nullable=False, default="SHIPPING")
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    address1 = Column(String(512), nullable=False)
    address2 = Column(String(512), nullable=True)
    city = Column(String(255), nullable=False)
    state = Column(String(255), nullable=False)
    postal_code = Column(String(32), nullable=False)
    country = Column(String(255), nullable=False, default="Turkey")
    phone = Column(String(64), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user = relationship("User", back_populates="addresses")
