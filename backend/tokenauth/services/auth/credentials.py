"""
Credential verification against the user repository.
"""

from tokenauth.core.errors import AuthError
from tokenauth.core.logging import get_logger
from .passwords import PasswordHasher
from .repository import UserRecord, UserRepository

logger = get_logger(__name__)


class CredentialVerifier:
    """Checks an identifier/password pair.

    Unknown user, inactive user and wrong password all fail with the same
    INVALID_CREDENTIALS error, and all three pay for one hash comparison.
    """

    def __init__(self, repository: UserRepository, hasher: PasswordHasher):
        self.repository = repository
        self.hasher = hasher

    async def authenticate(self, identifier: str | None, password: str | None) -> UserRecord:
        identifier = (identifier or "").strip()
        password = (password or "").strip()

        if not identifier:
            raise AuthError.missing_credentials("identifier")
        if not password:
            raise AuthError.missing_credentials("password")

        user = await self.repository.find_by_identifier(identifier)

        if user is None or not user.is_active:
            self._burn_comparison(password)
            reason = "unknown_user" if user is None else "inactive_user"
            raise AuthError.invalid_credentials(reason)

        if not self.hasher.compare(password, user.password_hash):
            raise AuthError.invalid_credentials("wrong_password")

        return user

    def _burn_comparison(self, password: str) -> None:
        dummy_hash = getattr(self.hasher, "dummy_hash", None)
        if dummy_hash is not None:
            self.hasher.compare(password, dummy_hash)
