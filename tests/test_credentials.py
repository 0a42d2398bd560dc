"""Tests for credential verification and enumeration safety."""

import pytest

from tokenauth.core.errors import AuthError, AuthErrorCode
from tokenauth.services.auth import CredentialVerifier, UserRecord


class CountingRepository:
    """Records lookups so tests can assert none happened."""

    def __init__(self, inner):
        self.inner = inner
        self.lookups = 0

    async def find_by_identifier(self, identifier):
        self.lookups += 1
        return await self.inner.find_by_identifier(identifier)

    async def find_by_id(self, user_id):
        return await self.inner.find_by_id(user_id)


class CountingHasher:
    def __init__(self, inner):
        self.inner = inner
        self.comparisons = 0

    @property
    def dummy_hash(self):
        return self.inner.dummy_hash

    def compare(self, plaintext, hashed):
        self.comparisons += 1
        return self.inner.compare(plaintext, hashed)


@pytest.fixture
def counting_repository(repository):
    return CountingRepository(repository)


@pytest.fixture
def verifier(counting_repository, hasher):
    return CredentialVerifier(counting_repository, hasher)


async def test_valid_credentials_return_user(verifier):
    user = await verifier.authenticate("u1", "secret")
    assert user.id == "u1"
    assert user.token_version == 0


async def test_inputs_are_trimmed(verifier):
    user = await verifier.authenticate("  u1 ", " secret  ")
    assert user.id == "u1"


@pytest.mark.parametrize(
    "identifier,password,missing",
    [
        ("", "secret", "identifier"),
        ("   ", "secret", "identifier"),
        (None, "secret", "identifier"),
        ("u1", "", "password"),
        ("u1", "\t ", "password"),
        ("u1", None, "password"),
        ("", "", "identifier"),
    ],
)
async def test_missing_credentials_before_lookup(
    verifier, counting_repository, identifier, password, missing
):
    with pytest.raises(AuthError) as exc_info:
        await verifier.authenticate(identifier, password)

    error = exc_info.value
    assert error.code is AuthErrorCode.MISSING_CREDENTIALS
    assert error.http_status == 400
    assert dict(error.details) == {"missing": missing}
    assert counting_repository.lookups == 0


async def _failure_body(verifier, identifier, password):
    with pytest.raises(AuthError) as exc_info:
        await verifier.authenticate(identifier, password)
    return exc_info.value


async def test_unknown_inactive_and_wrong_password_are_indistinguishable(repository, hasher):
    repository.add("u2", UserRecord(id="u2", password_hash=hasher.hash("secret"), is_active=False))
    verifier = CredentialVerifier(repository, hasher)

    unknown = await _failure_body(verifier, "nobody", "secret")
    inactive = await _failure_body(verifier, "u2", "secret")
    wrong = await _failure_body(verifier, "u1", "wrong")

    for error in (unknown, inactive, wrong):
        assert error.code is AuthErrorCode.INVALID_CREDENTIALS
        assert error.http_status == 401
    assert unknown.to_response() == inactive.to_response() == wrong.to_response()


async def test_unknown_user_still_compares_a_hash(repository, hasher):
    counting = CountingHasher(hasher)
    verifier = CredentialVerifier(repository, counting)

    with pytest.raises(AuthError):
        await verifier.authenticate("nobody", "secret")

    assert counting.comparisons == 1


async def test_inactive_user_with_right_password_rejected(repository, hasher):
    repository.set_active("u1", False)
    verifier = CredentialVerifier(repository, hasher)

    with pytest.raises(AuthError) as exc_info:
        await verifier.authenticate("u1", "secret")
    assert exc_info.value.code is AuthErrorCode.INVALID_CREDENTIALS


async def test_malformed_stored_hash_is_a_wrong_password(hasher):
    from tokenauth.services.auth import InMemoryUserRepository

    repository = InMemoryUserRepository([
        ("u3", UserRecord(id="u3", password_hash="not-a-bcrypt-hash")),
    ])
    verifier = CredentialVerifier(repository, hasher)

    with pytest.raises(AuthError) as exc_info:
        await verifier.authenticate("u3", "secret")
    assert exc_info.value.code is AuthErrorCode.INVALID_CREDENTIALS
