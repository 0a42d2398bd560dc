"""
FastAPI dependencies for authentication.
"""

from dataclasses import dataclass

from fastapi import Request

from tokenauth.core.errors import AuthError, to_auth_error
from tokenauth.services.auth import AuthService, TokenVerifier, extract_bearer_token


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, threaded through request handling."""
    user_id: str

    def to_dict(self) -> dict[str, str]:
        return {"userId": self.user_id}


class AuthGate:
    """
    Per-request access-token check.

    Returns an Identity or raises an AuthError; building the error response
    is left to the application's exception handlers.
    """

    def __init__(self, verifier: TokenVerifier):
        self.verifier = verifier

    def authenticate(self, authorization: str | None) -> Identity:
        try:
            token = extract_bearer_token(authorization)
            if token is None:
                raise AuthError.missing_token("authorization_header_missing_or_invalid")

            claims = self.verifier.verify_access(token)
            return Identity(user_id=claims.sub)
        except AuthError:
            raise
        except Exception as e:
            raise to_auth_error(e) from e


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate


async def get_current_identity(request: Request) -> Identity:
    """
    Resolve the caller from the raw Authorization header.
    Raises AUTH_MISSING_TOKEN / AUTH_INVALID_TOKEN / AUTH_EXPIRED_TOKEN.
    """
    gate = get_auth_gate(request)
    return gate.authenticate(request.headers.get("Authorization"))
