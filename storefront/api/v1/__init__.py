"""API v1 routes."""

from fastapi import APIRouter

from storefront.api.v1 import (
    addresses,
    admin,
    auth,
    banners,
    cart,
    categories,
    health,
    orders,
    products,
    profile,
    upload,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(addresses.router, prefix="/addresses", tags=["addresses"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(cart.router, prefix="/cart", tags=["cart"])
router.include_router(orders.router, prefix="/orders", tags=["orders"])
router.include_router(banners.router, prefix="/banners", tags=["banners"])
router.include_router(upload.router, prefix="/upload", tags=["upload"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
