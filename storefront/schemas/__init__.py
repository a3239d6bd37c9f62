"""Pydantic request/response schemas."""

from storefront.schemas.common import (
    CamelModel,
    ErrorResponse,
    ListResponse,
    MessageResponse,
    SuccessResponse,
)
from storefront.schemas.health import HealthResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "ListResponse",
    "MessageResponse",
    "SuccessResponse",
]
