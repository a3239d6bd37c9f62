"""Schemas for promotional banners."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from storefront.schemas.common import CamelModel

BannerType = Literal["HERO", "FEATURED_PRODUCTS"]


class BannerIn(CamelModel):
    """Banner create/update body; dates are ISO 8601 and may be omitted."""

    title: str = Field(default="", max_length=255)
    subtitle: str | None = Field(default=None, max_length=512)
    image: str = Field(default="", max_length=1024)
    link: str | None = Field(default=None, max_length=1024)
    type: BannerType = "HERO"
    is_active: bool = True
    order: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None


class BannerOut(CamelModel):
    id: int
    title: str
    subtitle: str | None = None
    image: str
    link: str | None = None
    type: str
    is_active: bool
    order: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
