"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter

from storefront.api.deps import AppSettings, DbSession, RateLimitStore
from storefront.core.database import check_db_connected
from storefront.schemas.health import HealthResponse
from storefront.services.rate_limit import RedisCounterStore

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: DbSession, settings: AppSettings, store: RateLimitStore) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        rate_limit_store="redis" if isinstance(store, RedisCounterStore) else "memory",
    )
