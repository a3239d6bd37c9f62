"""Catalog reads (products, categories) and category management."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import InputValidationError, NotFoundError
from storefront.models import Category, Discount, Product, Review
from storefront.models.base import as_utc, utcnow
from storefront.schemas.catalog import (
    CategoryIn,
    CategoryOut,
    CategoryRef,
    DiscountOut,
    ProductDetail,
    ProductOut,
    ReviewOut,
    SubcategoryOut,
)
from storefront.services.sanitize import (
    LIKE_ESCAPE_CHAR,
    escape_like,
    sanitize_input,
    slugify,
)

logger = logging.getLogger(__name__)

NEW_PRODUCT_DAYS = 30
DISPLAY_ORDER_MAX = 999

PRODUCT_NOT_FOUND = "Product not found"
CATEGORY_NOT_FOUND = "Category not found"


def unique_slug(
    db: Session, model, name: str, fallback: str, exclude_id: int | None = None
) -> str:
    """slugify(name), suffixed with -1, -2, ... until no other row of model uses it."""
    base = slugify(name) or fallback
    candidate = base
    n = 0
    while True:
        query = db.query(model.id).filter(model.slug == candidate)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if query.first() is None:
            return candidate
        n += 1
        candidate = f"{base}-{n}"


def active_discount(product: Product, now: datetime) -> Discount | None:
    """First active discount whose window contains now."""
    for discount in product.discounts:
        if not discount.is_active:
            continue
        if as_utc(discount.start_date) <= now <= as_utc(discount.end_date):
            return discount
    return None


def average_rating(reviews: list[Review]) -> float:
    if not reviews:
        return 0.0
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


def _category_ref(category: Category | None) -> CategoryRef | None:
    if category is None:
        return None
    return CategoryRef(id=category.id, name=category.name, slug=category.slug)


def _product_fields(product: Product, now: datetime) -> dict:
    discount = active_discount(product, now)
    created_at = as_utc(product.created_at)
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "price": float(product.price),
        "original_price": (
            float(product.original_price) if product.original_price is not None else None
        ),
        "images": list(product.images or []),
        "stock": product.stock,
        "is_active": product.is_active,
        "is_featured": product.is_featured,
        "is_sale_active": product.is_sale_active,
        "category": _category_ref(product.category),
        "rating": average_rating(product.reviews),
        "reviews": len(product.reviews),
        "discount": (
            DiscountOut(
                percentage=discount.percentage,
                badge_text=discount.badge_text,
                badge_color=discount.badge_color,
            )
            if discount is not None
            else None
        ),
        "is_new": created_at >= now - timedelta(days=NEW_PRODUCT_DAYS),
        "created_at": created_at,
    }


def format_product(product: Product, now: datetime | None = None) -> ProductOut:
    return ProductOut(**_product_fields(product, now or utcnow()))


def format_product_detail(product: Product, now: datetime | None = None) -> ProductDetail:
    reviews = sorted(
        product.reviews, key=lambda r: (as_utc(r.created_at), r.id), reverse=True
    )
    return ProductDetail(
        **_product_fields(product, now or utcnow()),
        reviews_list=[
            ReviewOut(
                id=r.id,
                rating=r.rating,
                comment=r.comment,
                user_name=r.user.name if r.user is not None else None,
                created_at=as_utc(r.created_at),
            )
            for r in reviews
        ],
    )


def product_query(db: Session):
    return db.query(Product).options(
        selectinload(Product.category),
        selectinload(Product.discounts),
        selectinload(Product.reviews),
    )


def list_products(
    db: Session,
    *,
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    featured: bool = False,
) -> list[Product]:
    """
    Active products. category is a slug ('all' or empty means no filter);
    search matches name or description case-insensitively with LIKE
    wildcards in the term taken literally.
    """
    query = product_query(db).filter(Product.is_active.is_(True))
    if category and category != "all":
        query = query.join(Product.category).filter(Category.slug == category)
    term = sanitize_input(search) if search else ""
    if term:
        pattern = f"%{escape_like(term)}%"
        query = query.filter(
            or_(
                Product.name.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                Product.description.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
            )
        )
    if featured:
        query = query.filter(Product.is_featured.is_(True))

    if sort_by == "price-low":
        query = query.order_by(Product.price.asc(), Product.id.asc())
    elif sort_by == "price-high":
        query = query.order_by(Product.price.desc(), Product.id.asc())
    elif sort_by == "newest":
        query = query.order_by(Product.created_at.desc(), Product.id.desc())
    elif sort_by == "name":
        query = query.order_by(Product.name.asc(), Product.id.asc())
    else:
        query = query.order_by(
            Product.is_featured.desc(), Product.created_at.desc(), Product.id.desc()
        )
    return query.all()


def get_product_by_slug(db: Session, slug: str) -> Product:
    """Active product by slug, reviews with authors loaded."""
    product = (
        product_query(db)
        .options(selectinload(Product.reviews).selectinload(Review.user))
        .filter(Product.slug == slug, Product.is_active.is_(True))
        .first()
    )
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


# --- Categories ---


def _active_product_counts(db: Session) -> dict[int, int]:
    rows = (
        db.query(Product.category_id, func.count(Product.id))
        .filter(Product.is_active.is_(True))
        .group_by(Product.category_id)
        .all()
    )
    return {category_id: count for category_id, count in rows}


def format_category(
    category: Category, counts: dict[int, int], include_parent: bool = False
) -> CategoryOut:
    subcategories = sorted(
        (c for c in category.subcategories if c.is_active),
        key=lambda c: (c.display_order, c.name),
    )
    return CategoryOut(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        image=category.image,
        parent_id=category.parent_id,
        display_order=category.display_order,
        is_active=category.is_active,
        product_count=counts.get(category.id, 0),
        subcategories=[
            SubcategoryOut(
                id=c.id,
                name=c.name,
                slug=c.slug,
                display_order=c.display_order,
                product_count=counts.get(c.id, 0),
            )
            for c in subcategories
        ],
        parent=_category_ref(category.parent) if include_parent else None,
    )


def list_categories(db: Session) -> list[CategoryOut]:
    categories = (
        db.query(Category)
        .options(selectinload(Category.subcategories))
        .order_by(Category.name.asc())
        .all()
    )
    counts = _active_product_counts(db)
    return [format_category(c, counts) for c in categories]


def _get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if category is None:
        raise NotFoundError(CATEGORY_NOT_FOUND)
    return category


def get_category(db: Session, category_id: int) -> CategoryOut:
    category = _get_category(db, category_id)
    return format_category(category, _active_product_counts(db), include_parent=True)


def _validate_category_input(
    db: Session, body: CategoryIn, category_id: int | None = None
) -> tuple[str, str | None]:
    name = sanitize_input(body.name)
    if not name:
        raise InputValidationError("Category name is required")
    if not 0 <= body.display_order <= DISPLAY_ORDER_MAX:
        raise InputValidationError(
            f"Display order must be between 0 and {DISPLAY_ORDER_MAX}"
        )
    if body.parent_id is not None:
        if category_id is not None and body.parent_id == category_id:
            raise InputValidationError("A category cannot be its own parent")
        if db.query(Category.id).filter(Category.id == body.parent_id).first() is None:
            raise InputValidationError("Parent category not found")
    description = sanitize_input(body.description) or None
    return name, description


def create_category(db: Session, body: CategoryIn) -> CategoryOut:
    name, description = _validate_category_input(db, body)
    category = Category(
        name=name,
        slug=unique_slug(db, Category, name, fallback="category"),
        description=description,
        image=body.image or None,
        parent_id=body.parent_id,
        display_order=body.display_order,
        is_active=body.is_active,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category created", extra={"category_id": category.id, "slug": category.slug})
    return format_category(category, _active_product_counts(db), include_parent=True)


def update_category(db: Session, category_id: int, body: CategoryIn) -> CategoryOut:
    category = _get_category(db, category_id)
    name, description = _validate_category_input(db, body, category_id=category.id)
    if name != category.name:
        category.slug = unique_slug(
            db, Category, name, fallback="category", exclude_id=category.id
        )
    category.name = name
    category.description = description
    category.image = body.image or None
    category.parent_id = body.parent_id
    category.display_order = body.display_order
    category.is_active = body.is_active
    db.commit()
    db.refresh(category)
    return format_category(category, _active_product_counts(db), include_parent=True)


def delete_category(db: Session, category_id: int) -> None:
    """Delete an empty category. Categories with products or subcategories are refused."""
    category = _get_category(db, category_id)
    if db.query(Product.id).filter(Product.category_id == category.id).first() is not None:
        raise InputValidationError(
            "This category has products; move or delete them first"
        )
    if db.query(Category.id).filter(Category.parent_id == category.id).first() is not None:
        raise InputValidationError(
            "This category has subcategories; move or delete them first"
        )
    db.delete(category)
    db.commit()
    logger.info("Category deleted", extra={"category_id": category_id})
