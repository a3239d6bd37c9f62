"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import Field

from storefront.schemas.common import CamelModel


class HealthResponse(CamelModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    rate_limit_store: Literal["redis", "memory"] = Field(
        description="Backend holding registration/login attempt counters",
    )
