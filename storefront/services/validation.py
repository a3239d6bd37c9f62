"""Schema-based validators for passwords and email addresses."""

import re
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, TypeAdapter, ValidationError

from storefront.core.errors import InputValidationError
from storefront.core.security import PASSWORD_MAX_BYTES

PASSWORD_MIN_LEN = 8
EMAIL_MAX_LEN = 254

PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LEN} characters long"
PASSWORD_TOO_LONG = f"Password must be at most {PASSWORD_MAX_BYTES} bytes long"
EMAIL_INVALID = "Enter a valid email address"
EMAIL_TOO_LONG = "Email address is too long"

# Checked in order after the length rules; the first failing rule is reported.
_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one digit"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)


def _check_password_strength(value: str) -> str:
    if len(value) < PASSWORD_MIN_LEN:
        raise ValueError(PASSWORD_TOO_SHORT)
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(PASSWORD_TOO_LONG)
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(value):
            raise ValueError(message)
    return value


def _check_email(value: str) -> str:
    if len(value) > EMAIL_MAX_LEN:
        raise ValueError(EMAIL_TOO_LONG)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(EMAIL_INVALID) from None
    return value


StrongPassword = Annotated[str, AfterValidator(_check_password_strength)]
EmailAddress = Annotated[str, AfterValidator(_check_email)]

_password_adapter: TypeAdapter[str] = TypeAdapter(StrongPassword)
_email_adapter: TypeAdapter[str] = TypeAdapter(EmailAddress)


def first_error_message(exc: ValidationError) -> str:
    """Message of the first failing rule, without pydantic's 'Value error, ' prefix."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    ctx_error = errors[0].get("ctx", {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return errors[0]["msg"]


def validate_password_strength(password: str) -> None:
    """Raise InputValidationError with the first failing password rule."""
    try:
        _password_adapter.validate_python(password)
    except ValidationError as e:
        raise InputValidationError(first_error_message(e)) from e


def validate_email_address(email: str) -> None:
    """Raise InputValidationError if email is not a syntactically valid address."""
    try:
        _email_adapter.validate_python(email)
    except ValidationError as e:
        raise InputValidationError(first_error_message(e)) from e


def normalize_email(email: str) -> str:
    return email.strip().lower()
