"""Promotional banners: public active list and admin management."""

import logging
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import BANNER_TYPES, Banner
from storefront.models.base import as_utc, utcnow
from storefront.schemas.banner import BannerIn, BannerOut
from storefront.services.sanitize import sanitize_input

logger = logging.getLogger(__name__)

BANNER_NOT_FOUND = "Banner not found"


def format_banner(banner: Banner) -> BannerOut:
    return BannerOut(
        id=banner.id,
        title=banner.title,
        subtitle=banner.subtitle,
        image=banner.image,
        link=banner.link,
        type=banner.type,
        is_active=banner.is_active,
        order=banner.display_order,
        start_date=as_utc(banner.start_date),
        end_date=as_utc(banner.end_date),
        created_at=as_utc(banner.created_at),
        updated_at=as_utc(banner.updated_at),
    )


def _ordered(query):
    return query.order_by(
        Banner.display_order.asc(), Banner.created_at.desc(), Banner.id.desc()
    )


def list_active_banners(
    db: Session, banner_type: str | None = None, now: datetime | None = None
) -> list[Banner]:
    """Active banners whose optional [start_date, end_date] window contains now."""
    if banner_type is not None and banner_type not in BANNER_TYPES:
        raise InputValidationError("Invalid banner type")
    now = now or utcnow()
    query = db.query(Banner).filter(
        Banner.is_active.is_(True),
        or_(Banner.start_date.is_(None), Banner.start_date <= now),
        or_(Banner.end_date.is_(None), Banner.end_date >= now),
    )
    if banner_type is not None:
        query = query.filter(Banner.type == banner_type)
    return _ordered(query).all()


def list_banners(db: Session) -> list[Banner]:
    return _ordered(db.query(Banner)).all()


def get_banner(db: Session, banner_id: int) -> Banner:
    banner = db.query(Banner).filter(Banner.id == banner_id).first()
    if banner is None:
        raise NotFoundError(BANNER_NOT_FOUND)
    return banner


def _banner_fields(body: BannerIn) -> dict:
    title = sanitize_input(body.title)
    image = body.image.strip()
    if not title or not image:
        raise InputValidationError("Title and image are required")
    if body.order < 0:
        raise InputValidationError("Order must be zero or greater")
    start_date = as_utc(body.start_date)
    end_date = as_utc(body.end_date)
    if start_date is not None and end_date is not None and start_date >= end_date:
        raise InputValidationError("Start date must be before end date")
    return {
        "title": title,
        "subtitle": sanitize_input(body.subtitle) or None,
        "image": image,
        "link": (body.link or "").strip() or None,
        "type": body.type,
        "is_active": body.is_active,
        "display_order": body.order,
        "start_date": start_date,
        "end_date": end_date,
    }


def create_banner(db: Session, body: BannerIn) -> Banner:
    banner = Banner(**_banner_fields(body))
    db.add(banner)
    db.commit()
    db.refresh(banner)
    logger.info("Banner created", extra={"banner_id": banner.id, "type": banner.type})
    return banner


def update_banner(db: Session, banner_id: int, body: BannerIn) -> Banner:
    banner = get_banner(db, banner_id)
    for key, value in _banner_fields(body).items():
        setattr(banner, key, value)
    db.commit()
    db.refresh(banner)
    return banner


def delete_banner(db: Session, banner_id: int) -> None:
    banner = get_banner(db, banner_id)
    db.delete(banner)
    db.commit()
    logger.info("Banner deleted", extra={"banner_id": banner_id})
