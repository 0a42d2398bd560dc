"""
JWT issuance and verification.

Access and refresh tokens are signed with two independent secrets, so a
token of one kind never verifies as the other.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from tokenauth.core.config import AuthConfig
from tokenauth.core.errors import AuthError
from tokenauth.core.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


class AccessTokenClaims(BaseModel):
    """Access token payload."""
    sub: str = Field(min_length=1)  # User ID
    iat: datetime | None = None
    exp: datetime


class RefreshTokenClaims(BaseModel):
    """Refresh token payload."""
    model_config = ConfigDict(populate_by_name=True)

    sub: str = Field(min_length=1)
    token_version: StrictInt = Field(alias="tokenVersion")
    iat: datetime | None = None
    exp: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JWTSigner:
    """Thin wrapper over PyJWT: sign claims with a TTL, decode with a secret."""

    def __init__(self, algorithm: str = "HS256", clock: Callable[[], datetime] = _utcnow):
        self.algorithm = algorithm
        self.clock = clock

    def sign(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = self.clock()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> dict[str, Any]:
        """Decode and validate signature and expiry. Raises PyJWT errors."""
        return jwt.decode(
            token,
            secret,
            algorithms=[self.algorithm],
            options={"require": ["exp"]},
        )

    def expiry_of(self, token: str, secret: str) -> datetime | None:
        """Expiry of a correctly signed token, ignoring whether it has passed."""
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
            return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError, OverflowError):
            return None


class TokenIssuer:
    """Mints access and refresh tokens from an AuthConfig."""

    def __init__(self, config: AuthConfig, signer: JWTSigner | None = None):
        if not isinstance(config, AuthConfig):
            raise AuthError.misconfigured("token_issuer_without_config")
        self.config = config
        self.signer = signer or JWTSigner(algorithm=config.algorithm)

    def issue_access_token(self, subject_id: str) -> str:
        return self.signer.sign(
            {"sub": str(subject_id)},
            self.config.access_secret,
            self.config.access_ttl,
        )

    def issue_refresh_token(self, subject_id: str, token_version: int) -> str:
        return self.signer.sign(
            {"sub": str(subject_id), "tokenVersion": token_version},
            self.config.refresh_secret,
            self.config.refresh_ttl,
        )

    def issue_pair(self, subject_id: str, token_version: int) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(subject_id),
            refresh_token=self.issue_refresh_token(subject_id, token_version),
        )


class TokenVerifier:
    """Validates signed tokens and classifies every failure."""

    def __init__(self, config: AuthConfig, signer: JWTSigner | None = None):
        if not isinstance(config, AuthConfig):
            raise AuthError.misconfigured("token_verifier_without_config")
        self.config = config
        self.signer = signer or JWTSigner(algorithm=config.algorithm)

    def verify(self, token: str | None, secret: str) -> dict[str, Any]:
        """
        Verify ``token`` against ``secret``.

        Returns:
            The decoded claims; ``sub`` is guaranteed to be a non-empty string.

        Raises:
            AuthError: MISSING_TOKEN, EXPIRED_TOKEN or INVALID_TOKEN.
        """
        if token is None or not token.strip():
            raise AuthError.missing_token("token_absent")

        try:
            claims = self.signer.verify(token, secret)
        except jwt.ExpiredSignatureError as e:
            expired_at = self.signer.expiry_of(token, secret)
            logger.debug("Token has expired")
            raise AuthError.expired_token(
                reason="token_expired",
                expired_at=expired_at.isoformat() if expired_at else None,
            ) from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise AuthError.invalid_token(f"jwt_{type(e).__name__}") from e

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub:
            raise AuthError.invalid_token("missing_subject_claim")

        return claims

    def verify_access(self, token: str | None) -> AccessTokenClaims:
        claims = self.verify(token, self.config.access_secret)
        try:
            return AccessTokenClaims.model_validate(claims)
        except ValidationError as e:
            raise AuthError.invalid_token("malformed_access_claims") from e

    def verify_refresh(self, token: str | None) -> RefreshTokenClaims:
        claims = self.verify(token, self.config.refresh_secret)
        try:
            return RefreshTokenClaims.model_validate(claims)
        except ValidationError as e:
            raise AuthError.invalid_token("malformed_refresh_claims") from e


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Returns None for a missing header, any other scheme, or an empty token.
    """
    if not isinstance(authorization, str) or not authorization.startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None
