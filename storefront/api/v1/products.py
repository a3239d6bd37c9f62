"""Public catalog endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from storefront.api.deps import DbSession
from storefront.schemas.catalog import ProductDetail, ProductOut
from storefront.schemas.common import ListResponse, SuccessResponse
from storefront.services import catalog

router = APIRouter()


@router.get("", response_model=ListResponse[ProductOut])
def list_products(
    db: DbSession,
    category: Annotated[str | None, Query(max_length=255)] = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy", max_length=32)] = None,
    featured: bool = False,
) -> ListResponse[ProductOut]:
    """
    Active products, optionally filtered by category slug, a search term over
    name and description, and featured flag.

    sortBy: price-low, price-high, newest, name; anything else orders
    featured products first, then newest.
    """
    products = catalog.list_products(
        db, category=category, search=search, sort_by=sort_by, featured=featured
    )
    data = [catalog.format_product(p) for p in products]
    return ListResponse(data=data, count=len(data))


@router.get("/{slug}", response_model=SuccessResponse[ProductDetail])
def get_product(slug: str, db: DbSession) -> SuccessResponse[ProductDetail]:
    product = catalog.get_product_by_slug(db, slug)
    return SuccessResponse(data=catalog.format_product_detail(product))
