"""Application error taxonomy.

Every error a request can end in derives from ``AppError``. Each class
carries the HTTP status and the message the client is allowed to see;
handlers in ``app.main`` turn them into JSON responses.

Authentication failures share one public message per family (OTP vs token)
so a client cannot tell a wrong code from an expired one.
"""
from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.public_message
        super().__init__(self.message)

    @property
    def detail(self) -> str:
        return self.public_message


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400
    public_message = "Validation error"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    @property
    def detail(self) -> str:
        return self.message


class ConflictError(AppError):
    status_code = 409
    public_message = "Resource already exists"

    @property
    def detail(self) -> str:
        return self.message


class NotFoundError(AppError):
    status_code = 404
    public_message = "Not found"

    @property
    def detail(self) -> str:
        return self.message


class NotVerifiedError(AppError):
    status_code = 403
    public_message = "Account not verified. Please complete signup first."


class AuthError(AppError):
    status_code = 401
    public_message = "Authentication failed"


# One-time codes

class OtpError(AuthError):
    public_message = "Invalid or expired OTP"


class NoCodeIssuedError(OtpError):
    pass


class OtpMismatchError(OtpError):
    pass


class OtpExpiredError(OtpError):
    pass


# Session tokens

class TokenError(AuthError):
    public_message = "Invalid or expired token"


class MissingTokenError(TokenError):
    public_message = "Access token required"


class InvalidTokenError(TokenError):
    pass


class TokenExpiredError(TokenError):
    pass


class UpstreamError(AppError):
    """Email delivery or identity provider failure. Not retried here."""

    status_code = 502
    public_message = "Upstream service failure, please try again"


class ProviderNotConfiguredError(UpstreamError):
    status_code = 400
    public_message = "Google authentication not configured"


class RateLimitedError(AppError):
    status_code = 429
    public_message = "Too many attempts, please try again later"

    def __init__(self, message: str | None = None, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after

    @property
    def detail(self) -> str:
        return self.message
