"""Shared request dependencies: authentication, role guard, client IP, rate-limit store."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.core.config import Settings, get_settings
from storefront.core.database import get_db
from storefront.core.errors import AuthorizationError
from storefront.core.security import decode_access_token
from storefront.models import Role, User
from storefront.services.rate_limit import CounterStore

security = HTTPBearer(auto_error=False)

FALLBACK_CLIENT_IP = "127.0.0.1"

DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DbSession,
) -> User:
    """
    Dependency: require a valid Bearer JWT for an existing user.
    Every failure is the same 401 so callers cannot tell which check failed.
    """
    if credentials is None:
        raise AuthorizationError()
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise AuthorizationError() from None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthorizationError() from None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthorizationError()
    return user


def require_role(role: Role) -> Callable[..., User]:
    """
    Dependency factory: authenticated user holding `role`.
    Callers without it get the same 401 as unauthenticated callers.
    """

    def _guard(user: Annotated[User, Depends(get_current_user)]) -> User:
        if user.role != role.value:
            raise AuthorizationError()
        return user

    return _guard


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_role(Role.ADMIN))]


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For entry, else X-Real-IP, else the socket peer, else 127.0.0.1."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    if request.client is not None and request.client.host:
        return request.client.host
    return FALLBACK_CLIENT_IP


def get_rate_limit_store(request: Request) -> CounterStore:
    """Counter store created in the application lifespan."""
    return request.app.state.rate_limit_store


ClientIP = Annotated[str, Depends(get_client_ip)]
RateLimitStore = Annotated[CounterStore, Depends(get_rate_limit_store)]
