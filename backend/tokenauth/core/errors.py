"""
Domain errors for the authentication module.

Every failure that leaves a component is an ``AuthError`` carrying an
``AuthErrorCode``. Callers branch on ``error.code``, not on exception types.
"""

import enum
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class AuthErrorCode(str, enum.Enum):
    """Stable error codes surfaced to clients."""
    # Infrastructure
    MISCONFIGURED = "AUTH_MISCONFIGURED"
    INTERNAL_ERROR = "AUTH_INTERNAL_ERROR"

    # Input
    MISSING_CREDENTIALS = "AUTH_MISSING_CREDENTIALS"

    # Authentication
    INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    MISSING_TOKEN = "AUTH_MISSING_TOKEN"
    INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    EXPIRED_TOKEN = "AUTH_EXPIRED_TOKEN"
    REFRESH_TOKEN_INVALID = "AUTH_REFRESH_TOKEN_INVALID"

    # Authorization (reserved for role checks)
    FORBIDDEN = "AUTH_FORBIDDEN"


# code -> (http status, static message)
ERROR_CATALOG: dict[AuthErrorCode, tuple[int, str]] = {
    AuthErrorCode.MISCONFIGURED: (500, "Authentication system misconfigured"),
    AuthErrorCode.INTERNAL_ERROR: (500, "Unexpected authentication error"),
    AuthErrorCode.MISSING_CREDENTIALS: (400, "Missing credentials"),
    AuthErrorCode.INVALID_CREDENTIALS: (401, "Invalid credentials"),
    AuthErrorCode.MISSING_TOKEN: (401, "Authentication token missing"),
    AuthErrorCode.INVALID_TOKEN: (401, "Invalid authentication token"),
    AuthErrorCode.EXPIRED_TOKEN: (401, "Authentication token expired"),
    AuthErrorCode.REFRESH_TOKEN_INVALID: (401, "Invalid refresh token"),
    AuthErrorCode.FORBIDDEN: (403, "Access denied (insufficient permissions)"),
}

DetailValue = str | int | float | bool | None


class AuthError(Exception):
    """
    A typed, coded authentication failure.

    ``message`` and ``http_status`` come from the catalog and never vary per
    call. ``details`` may hold non-sensitive diagnostics and is returned to
    clients. ``reason`` is an internal diagnostic for logs only.
    """

    def __init__(
        self,
        code: AuthErrorCode,
        *,
        details: Mapping[str, DetailValue] | None = None,
        reason: str | None = None,
    ) -> None:
        status, message = ERROR_CATALOG[code]
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = status
        self.details = MappingProxyType(dict(details)) if details else None
        self.reason = reason

    def __repr__(self) -> str:
        return f"AuthError(code={self.code.value!r}, reason={self.reason!r})"

    @property
    def is_internal(self) -> bool:
        return self.http_status >= 500

    def to_response(self) -> dict[str, Any]:
        """Client-facing error body."""
        body: dict[str, Any] = {
            "success": False,
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            body["details"] = dict(self.details)
        return body

    # Factories

    @classmethod
    def misconfigured(cls, reason: str) -> "AuthError":
        return cls(AuthErrorCode.MISCONFIGURED, reason=reason)

    @classmethod
    def missing_credentials(cls, missing: str) -> "AuthError":
        return cls(AuthErrorCode.MISSING_CREDENTIALS, details={"missing": missing})

    @classmethod
    def invalid_credentials(cls, reason: str | None = None) -> "AuthError":
        return cls(AuthErrorCode.INVALID_CREDENTIALS, reason=reason)

    @classmethod
    def missing_token(cls, reason: str | None = None) -> "AuthError":
        return cls(AuthErrorCode.MISSING_TOKEN, reason=reason)

    @classmethod
    def invalid_token(cls, reason: str | None = None) -> "AuthError":
        return cls(AuthErrorCode.INVALID_TOKEN, reason=reason)

    @classmethod
    def expired_token(
        cls, reason: str | None = None, expired_at: str | None = None
    ) -> "AuthError":
        details = {"expired_at": expired_at} if expired_at else None
        return cls(AuthErrorCode.EXPIRED_TOKEN, details=details, reason=reason)

    @classmethod
    def refresh_token_invalid(cls, reason: str | None = None) -> "AuthError":
        return cls(AuthErrorCode.REFRESH_TOKEN_INVALID, reason=reason)

    @classmethod
    def forbidden(cls, reason: str | None = None) -> "AuthError":
        return cls(AuthErrorCode.FORBIDDEN, reason=reason)


def to_auth_error(failure: object) -> AuthError:
    """
    Convert any failure into a safe, typed AuthError.

    AuthErrors pass through unchanged. Anything else becomes INTERNAL_ERROR;
    the original is kept as ``__cause__`` for logging and never reaches the
    message or details.
    """
    if isinstance(failure, AuthError):
        return failure

    error = AuthError(
        AuthErrorCode.INTERNAL_ERROR,
        reason=f"unexpected_{type(failure).__name__}",
    )
    if isinstance(failure, BaseException):
        error.__cause__ = failure
    return error
