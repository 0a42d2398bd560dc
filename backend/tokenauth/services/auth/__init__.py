"""Authentication service."""

from .credentials import CredentialVerifier
from .jwt import TokenIssuer, TokenPair, TokenVerifier, extract_bearer_token
from .passwords import BcryptPasswordHasher
from .refresh import RefreshCoordinator
from .repository import InMemoryUserRepository, UserRecord, UserRepository
from .service import AuthService

__all__ = [
    "AuthService",
    "BcryptPasswordHasher",
    "CredentialVerifier",
    "InMemoryUserRepository",
    "RefreshCoordinator",
    "TokenIssuer",
    "TokenPair",
    "TokenVerifier",
    "UserRecord",
    "UserRepository",
    "extract_bearer_token",
]
