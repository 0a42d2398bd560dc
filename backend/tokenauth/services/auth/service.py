"""
Authentication service: login, refresh and revocation.
"""

from tokenauth.core.config import AuthConfig
from tokenauth.core.errors import AuthError, to_auth_error
from tokenauth.core.logging import get_logger
from tokenauth.core.metrics import MetricsCollector
from .credentials import CredentialVerifier
from .jwt import JWTSigner, TokenIssuer, TokenPair, TokenVerifier
from .passwords import BcryptPasswordHasher, PasswordHasher
from .refresh import RefreshCoordinator
from .repository import UserRepository

logger = get_logger(__name__)


class AuthService:
    """Service for credential login and the token lifecycle."""

    def __init__(
        self,
        config: AuthConfig,
        repository: UserRepository,
        hasher: PasswordHasher | None = None,
        metrics: MetricsCollector | None = None,
    ):
        if not isinstance(config, AuthConfig):
            raise AuthError.misconfigured("auth_service_without_config")

        signer = JWTSigner(algorithm=config.algorithm)
        self.config = config
        self.repository = repository
        self.metrics = metrics or MetricsCollector()
        self.issuer = TokenIssuer(config, signer)
        self.verifier = TokenVerifier(config, signer)
        self.credentials = CredentialVerifier(repository, hasher or BcryptPasswordHasher())
        self.refresher = RefreshCoordinator(repository, self.issuer, self.verifier)

    async def login(self, identifier: str | None, password: str | None) -> TokenPair:
        """Authenticate a user and return a fresh token pair."""
        try:
            user = await self.credentials.authenticate(identifier, password)
        except Exception as e:
            error = to_auth_error(e)
            await self.metrics.track_login(error.code.value)
            logger.info_with_data("Login rejected", {"code": error.code.value, "reason": error.reason})
            if error is e:
                raise
            raise error from e

        tokens = self.issuer.issue_pair(user.id, user.token_version)
        await self.metrics.track_login("success")
        logger.info_with_data("Login succeeded", {"user_id": user.id})
        return tokens

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        """Issue a new access token from a refresh token."""
        try:
            tokens = await self.refresher.refresh(refresh_token)
        except Exception as e:
            error = to_auth_error(e)
            await self.metrics.track_refresh(error.code.value)
            logger.info_with_data("Refresh rejected", {"code": error.code.value, "reason": error.reason})
            if error is e:
                raise
            raise error from e

        await self.metrics.track_refresh("success")
        return tokens

    async def invalidate_user_tokens(self, user_id: str) -> int | None:
        """
        Revoke every refresh token issued to ``user_id`` so far.

        Access tokens already issued stay valid until they expire.

        Returns:
            The new token version, or None if the user does not exist.
        """
        try:
            version = await self.repository.increment_token_version(user_id)
        except AuthError:
            raise
        except Exception as e:
            raise to_auth_error(e) from e

        if version is None:
            logger.warning_with_data("Revocation for unknown user", {"user_id": user_id})
            return None

        await self.metrics.track_revocation()
        logger.info_with_data("User tokens invalidated", {"user_id": user_id, "version": version})
        return version
