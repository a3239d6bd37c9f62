"""ORM model for promotional banners."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from storefront.models.base import Base, utcnow

BANNER_TYPES = ("HERO", "FEATURED_PRODUCTS")


class Banner(Base):
    """
    Homepage banner. Visible when active and inside the optional
    [start_date, end_date] window; either bound may be null (open-ended).
    """

    __tablename__ = "banners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    subtitle = Column(String(512), nullable=True)
    image = Column(String(1024), nullable=False)
    link = Column(String(1024), nullable=True)
    type = Column(String(32), nullable=False, default="HERO")
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
