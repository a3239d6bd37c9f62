"""Shared schema base and the success/error envelopes used by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model whose JSON keys are camelCase; snake_case names also accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SuccessResponse(CamelModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    message: str | None = None
    data: T


class ListResponse(CamelModel, Generic[T]):
    """Success envelope for collections; count is len(data)."""

    success: bool = True
    data: list[T]
    count: int = Field(..., ge=0)


class MessageResponse(CamelModel):
    """Success envelope without a payload (deletes, idempotent operations)."""

    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    """Failure envelope. Rate-limit rejections also carry reason and resetTime."""

    success: bool = False
    error: str
    rate_limited: bool | None = None
    reason: str | None = None
    reset_time: int | None = Field(
        default=None, description="Epoch milliseconds at which the limit resets"
    )
