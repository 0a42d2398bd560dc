"""
Refresh flow: trade a valid, non-revoked refresh token for a new access token.
"""

from tokenauth.core.errors import AuthError, AuthErrorCode
from .jwt import TokenIssuer, TokenPair, TokenVerifier
from .repository import UserRepository


class RefreshCoordinator:
    """
    Verifies a refresh token, checks its version against the stored one and
    issues a new access token.

    Revocation works by version: once the repository bumps a user's
    ``token_version``, every refresh token carrying an older value fails
    here. The refresh token itself is returned unchanged (no rotation).
    """

    def __init__(
        self,
        repository: UserRepository,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
    ):
        self.repository = repository
        self.issuer = issuer
        self.verifier = verifier

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        token = (refresh_token or "").strip()
        if not token:
            raise AuthError.refresh_token_invalid("refresh_token_missing")

        try:
            claims = self.verifier.verify_refresh(token)
        except AuthError as e:
            if e.code is AuthErrorCode.EXPIRED_TOKEN:
                raise AuthError.expired_token(
                    reason="refresh_token_expired",
                    expired_at=(e.details or {}).get("expired_at"),
                ) from e
            raise AuthError.refresh_token_invalid(
                f"refresh_{e.reason or 'verification_failed'}"
            ) from e

        user = await self.repository.find_by_id(claims.sub)
        if user is None:
            raise AuthError.refresh_token_invalid("user_not_found")
        if user.token_version != claims.token_version:
            raise AuthError.refresh_token_invalid("token_version_mismatch")

        return TokenPair(
            access_token=self.issuer.issue_access_token(user.id),
            refresh_token=token,
        )
