"""
Account lifecycle: rate-limited registration with first-user-admin bootstrap,
rate-limited login, profile and password updates.
"""

import logging
import math
import time
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import (
    AuthorizationError,
    InputValidationError,
    RateLimitExceededError,
)
from storefront.core.security import hash_password, verify_password
from storefront.models import Role, User
from storefront.models.base import as_utc
from storefront.schemas.auth import UserOut
from storefront.services.rate_limit import FixedWindowLimiter, RateLimitResult
from storefront.services.sanitize import sanitize_input
from storefront.services.validation import (
    normalize_email,
    validate_email_address,
    validate_password_strength,
)

logger = logging.getLogger(__name__)

ADMIN_BOOTSTRAP_MESSAGE = (
    "Registration successful! As the first user you have been granted admin "
    "privileges. You can now sign in."
)
REGISTERED_MESSAGE = "Registration successful! You can now sign in."
INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "An account with this email address already exists"


@dataclass
class RegistrationResult:
    user: User
    is_first_user: bool
    ip_limit: RateLimitResult
    email_limit: RateLimitResult

    @property
    def message(self) -> str:
        return ADMIN_BOOTSTRAP_MESSAGE if self.is_first_user else REGISTERED_MESSAGE


def format_user(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        created_at=as_utc(user.created_at),
    )


def _hours_until(reset_time_ms: int) -> int:
    remaining_ms = max(0, reset_time_ms - int(time.time() * 1000))
    return max(1, math.ceil(remaining_ms / (60 * 60 * 1000)))


def _minutes_until(reset_time_ms: int) -> int:
    remaining_ms = max(0, reset_time_ms - int(time.time() * 1000))
    return max(1, math.ceil(remaining_ms / (60 * 1000)))


def _enforce(result: RateLimitResult, message: str) -> None:
    if not result.allowed:
        raise RateLimitExceededError(
            message, reason=result.reason or "", reset_time=result.reset_time
        )


def register_user(
    db: Session,
    ip_limiter: FixedWindowLimiter,
    email_limiter: FixedWindowLimiter,
    *,
    name: str,
    email: str,
    password: str,
    client_ip: str,
) -> RegistrationResult:
    """
    Create an account. The first account in an empty store becomes ADMIN.

    Order of checks: required fields, email/password rules, per-IP limit,
    per-email limit, duplicate email. Rejections before the limiters do not
    consume an attempt.
    """
    name = sanitize_input(name)
    email = sanitize_input(email)
    if not name or not email or not password:
        raise InputValidationError("Name, email and password are required")

    validate_email_address(email)
    validate_password_strength(password)

    ip_limit = ip_limiter.hit(client_ip)
    _enforce(
        ip_limit,
        "Too many registration attempts from this IP address. "
        f"Try again in {_hours_until(ip_limit.reset_time)} hour(s).",
    )

    email = normalize_email(email)
    email_limit = email_limiter.hit(email)
    _enforce(
        email_limit,
        "Too many registration attempts for this email address. "
        f"Try again in {_hours_until(email_limit.reset_time)} hour(s).",
    )

    if db.query(User.id).filter(User.email == email).first() is not None:
        raise InputValidationError(EMAIL_TAKEN)

    # Two concurrent first registrations can both see zero users; accepted.
    user_count = db.query(func.count(User.id)).scalar() or 0
    is_first_user = user_count == 0
    role = Role.ADMIN if is_first_user else Role.USER

    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name,
        role=role.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise InputValidationError(EMAIL_TAKEN) from e
    db.refresh(user)

    logger.info(
        "User registered",
        extra={"user_id": user.id, "role": user.role, "first_user": is_first_user},
    )
    return RegistrationResult(
        user=user,
        is_first_user=is_first_user,
        ip_limit=ip_limit,
        email_limit=email_limit,
    )


def authenticate(
    db: Session,
    ip_limiter: FixedWindowLimiter,
    email_limiter: FixedWindowLimiter,
    *,
    email: str,
    password: str,
    client_ip: str,
) -> User:
    """
    Verify credentials. Both login limiters count the attempt before the
    password check and are cleared on success.
    """
    email = normalize_email(sanitize_input(email))

    ip_limit = ip_limiter.hit(client_ip)
    _enforce(
        ip_limit,
        "Too many login attempts from this IP address. "
        f"Try again in {_minutes_until(ip_limit.reset_time)} minute(s).",
    )
    email_limit = email_limiter.hit(email)
    _enforce(
        email_limit,
        "Too many login attempts for this account. "
        f"Try again in {_minutes_until(email_limit.reset_time)} minute(s).",
    )

    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"client_ip": client_ip})
        raise AuthorizationError(INVALID_CREDENTIALS)

    ip_limiter.reset(client_ip)
    email_limiter.reset(email)
    logger.info("Login succeeded", extra={"user_id": user.id})
    return user


def update_profile(
    db: Session, user: User, *, first_name: str, last_name: str, email: str
) -> User:
    first_name = sanitize_input(first_name)
    last_name = sanitize_input(last_name)
    email = sanitize_input(email)
    if not first_name or not last_name or not email:
        raise InputValidationError("First name, last name and email are required")
    validate_email_address(email)
    email = normalize_email(email)

    taken = (
        db.query(User.id)
        .filter(User.email == email, User.id != user.id)
        .first()
    )
    if taken is not None:
        raise InputValidationError("This email address is used by another account")

    user.first_name = first_name
    user.last_name = last_name
    user.name = f"{first_name} {last_name}"
    user.email = email
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise InputValidationError("This email address is used by another account") from e
    db.refresh(user)
    return user


def change_password(
    db: Session, user: User, *, current_password: str, new_password: str
) -> None:
    if not current_password or not new_password:
        raise InputValidationError("Current password and new password are required")
    if not verify_password(current_password, user.password_hash):
        raise InputValidationError("Current password is incorrect")
    validate_password_strength(new_password)
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed", extra={"user_id": user.id})
