"""Error types raised by services and rendered as JSON envelopes by the API layer."""


class StorefrontError(Exception):
    """Base for errors that map to a client-facing status code and message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(StorefrontError):
    """Malformed or missing input; the message names the failing field or rule."""

    status_code = 400


class AuthorizationError(StorefrontError):
    """Missing or insufficient session. Same message whether or not the resource exists."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Missing resource, also used for resources owned by another user."""

    status_code = 404


class RateLimitExceededError(StorefrontError):
    """A fixed-window counter is exhausted; carries a reason code and reset time."""

    status_code = 429

    def __init__(self, message: str, reason: str, reset_time: int) -> None:
        self.reason = reason
        # Epoch milliseconds at which the window resets.
        self.reset_time = reset_time
        super().__init__(message)
