"""Registration, login and current-user endpoints."""

from fastapi import APIRouter, status

from storefront.api.deps import AppSettings, ClientIP, CurrentUser, DbSession, RateLimitStore
from storefront.core.security import create_access_token
from storefront.schemas.auth import (
    LoginRequest,
    RateLimitInfo,
    RegisterRequest,
    RegisterResponse,
    TokenData,
    UserOut,
)
from storefront.schemas.common import SuccessResponse
from storefront.services import accounts
from storefront.services.rate_limit import (
    login_email_limiter,
    login_ip_limiter,
    register_email_limiter,
    register_ip_limiter,
)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: DbSession,
    store: RateLimitStore,
    settings: AppSettings,
    client_ip: ClientIP,
) -> RegisterResponse:
    """
    Create an account. The first account ever created is granted ADMIN.

    Limited to REGISTER_IP_ATTEMPTS per IP and REGISTER_EMAIL_ATTEMPTS per
    email within their windows; exceeding either returns 429 with a reason
    (IP_BLOCKED or EMAIL_BLOCKED) and resetTime in epoch milliseconds.
    """
    result = accounts.register_user(
        db,
        register_ip_limiter(store, settings),
        register_email_limiter(store, settings),
        name=body.name,
        email=body.email,
        password=body.password,
        client_ip=client_ip,
    )
    return RegisterResponse(
        message=result.message,
        data=accounts.format_user(result.user),
        is_admin=result.is_first_user,
        rate_limit_info=RateLimitInfo(
            ip_remaining=result.ip_limit.remaining,
            email_remaining=result.email_limit.remaining,
        ),
    )


@router.post("/login", response_model=SuccessResponse[TokenData])
def login(
    body: LoginRequest,
    db: DbSession,
    store: RateLimitStore,
    settings: AppSettings,
    client_ip: ClientIP,
) -> SuccessResponse[TokenData]:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <accessToken>
    """
    user = accounts.authenticate(
        db,
        login_ip_limiter(store, settings),
        login_email_limiter(store, settings),
        email=body.email,
        password=body.password,
        client_ip=client_ip,
    )
    token = create_access_token(sub=user.id, role=user.role)
    return SuccessResponse(
        data=TokenData(
            access_token=token,
            token_type="bearer",
            user=accounts.format_user(user),
        )
    )


@router.get("/me", response_model=SuccessResponse[UserOut])
def me(user: CurrentUser) -> SuccessResponse[UserOut]:
    return SuccessResponse(data=accounts.format_user(user))
