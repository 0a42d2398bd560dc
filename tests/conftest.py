import asyncio
import inspect
from datetime import timedelta

import pytest

from tokenauth.core.config import AuthConfig, Settings
from tokenauth.services.auth import (
    AuthService,
    BcryptPasswordHasher,
    InMemoryUserRepository,
    UserRecord,
)

ACCESS_SECRET = "access-secret-for-tests-only-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-only-0123456789abcdef"


@pytest.fixture
def settings():
    """Settings with both secrets set and default TTLs."""
    return Settings(
        ACCESS_SECRET=ACCESS_SECRET,
        REFRESH_SECRET=REFRESH_SECRET,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
def config():
    return AuthConfig(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(days=1),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture(scope="session")
def hasher():
    # Minimum cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture(scope="session")
def secret_hash(hasher):
    return hasher.hash("secret")


@pytest.fixture
def repository(secret_hash):
    """Repository holding the active user u1 with password 'secret'."""
    return InMemoryUserRepository([
        ("u1", UserRecord(id="u1", password_hash=secret_hash, is_active=True, token_version=0)),
    ])


@pytest.fixture
def auth_service(config, repository, hasher):
    return AuthService(config, repository, hasher=hasher)


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames
            if name in pyfuncitem.funcargs
        }
        asyncio.run(pyfuncitem.obj(**call_kwargs))
        return True
    return None


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test as async")
