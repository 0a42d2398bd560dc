"""
Password hashing with bcrypt.
"""

from typing import Protocol

import bcrypt

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


class PasswordHasher(Protocol):
    def compare(self, plaintext: str, hashed: str) -> bool:
        ...


class BcryptPasswordHasher:
    """bcrypt hash/compare."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def compare(self, plaintext: str, hashed: str) -> bool:
        """Verify a password against a hash. Malformed hashes never match."""
        try:
            password_bytes = plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
            return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
        except ValueError:
            return False

    @property
    def dummy_hash(self) -> str:
        """A valid hash of a random value, compared against when no user matched."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(bcrypt.gensalt().decode("ascii"))
        return self._dummy_hash
