"""Exception handlers rendering every failure as a {"success": false, "error": ...} envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.errors import RateLimitExceededError, StorefrontError
from storefront.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_body(message: str, **extra) -> dict:
    return ErrorResponse(error=message, **extra).model_dump(by_alias=True, exclude_none=True)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Typed service errors: 400/401/404/429 with the service's message."""
    if isinstance(exc, RateLimitExceededError):
        logger.warning(
            "Rate limit rejection",
            extra={"path": request.url.path, "reason": exc.reason},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.message,
                rateLimited=True,
                reason=exc.reason,
                resetTime=exc.reset_time,
            ),
        )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message),
        headers=headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework HTTP errors (unknown route, method not allowed, dependency 401s)."""
    if exc.status_code >= 500:
        logger.error("HTTP %s: %s", exc.status_code, exc.detail, extra={"path": request.url.path})
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc is e.g. ("body", "shippingInfo", "firstName"); drop the location kind.
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies/params: 400 naming the first failing field and rule."""
    message = _describe_validation_error(exc)
    logger.info("Request validation failed", extra={"path": request.url.path, "error": message})
    return JSONResponse(status_code=400, content=_error_body(message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else: log with traceback, return a generic 500 without internal detail."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content=_error_body(INTERNAL_ERROR_MESSAGE))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
