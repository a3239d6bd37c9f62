"""Request/response schemas for registration, login and profile endpoints."""

from datetime import datetime

from pydantic import ConfigDict, Field

from storefront.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """
    Registration form. Fields default to empty so missing values are reported
    by the registration flow after sanitization, with one message.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=1024)


class LoginRequest(CamelModel):
    """Credentials for login."""

    model_config = ConfigDict(str_strip_whitespace=False)

    email: str = Field(..., min_length=1, max_length=320, description="Email")
    password: str = Field(..., min_length=1, max_length=1024, description="Password")


class UserOut(CamelModel):
    """Account as returned to clients (never includes the password hash)."""

    id: int
    email: str
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime


class RateLimitInfo(CamelModel):
    ip_remaining: int
    email_remaining: int


class RegisterResponse(CamelModel):
    """201 body for POST /auth/register."""

    success: bool = True
    message: str
    data: UserOut
    is_admin: bool
    rate_limit_info: RateLimitInfo


class TokenData(CamelModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserOut


class ProfileUpdateRequest(CamelModel):
    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=320)


class PasswordChangeRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    current_password: str = Field(default="", max_length=1024)
    new_password: str = Field(default="", max_length=1024)
