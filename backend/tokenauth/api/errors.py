"""
Centralized failure handler: every failure leaves the API as an AuthError body.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tokenauth.core.errors import AuthError, to_auth_error
from tokenauth.core.logging import get_logger
from tokenauth.core.metrics import MetricsCollector

logger = get_logger(__name__)


async def error_response(request: Request, error: AuthError) -> JSONResponse:
    """Log, count and serialize a domain error."""
    data = {
        "path": request.url.path,
        "method": request.method,
        "code": error.code.value,
        "reason": error.reason,
    }
    if error.is_internal:
        logger.error_with_data("Request failed", data, exc_info=error.__cause__)
    else:
        logger.warning_with_data("Request rejected", data)

    metrics: MetricsCollector | None = getattr(request.app.state, "metrics", None)
    if metrics is not None:
        await metrics.track_rejection(error.code.value)

    headers = {"WWW-Authenticate": "Bearer"} if error.http_status == 401 else None
    return JSONResponse(
        status_code=error.http_status,
        content=error.to_response(),
        headers=headers,
    )


def malformed_body_error(request: Request) -> AuthError:
    """
    A body that is not a JSON object never carries usable credentials.
    The refresh route reports it as a bad refresh token, everything else as
    missing credentials.
    """
    if request.url.path.endswith("/auth/refresh"):
        return AuthError.refresh_token_invalid("malformed_body")
    return AuthError.missing_credentials("body")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the AuthError handler and the catch-all that normalizes everything else."""

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        return await error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_body(request: Request, exc: RequestValidationError):
        return await error_response(request, malformed_body_error(request))

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        return await error_response(request, to_auth_error(exc))
