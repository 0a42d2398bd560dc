"""Tests for settings, TTL parsing and the fail-fast AuthConfig."""

from datetime import timedelta

import pytest

from tokenauth.core.config import AuthConfig, Settings, parse_duration
from tokenauth.core.errors import AuthError, AuthErrorCode

from conftest import ACCESS_SECRET, REFRESH_SECRET


class TestParseDuration:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1d", timedelta(days=1)),
            ("7d", timedelta(days=7)),
            ("15m", timedelta(minutes=15)),
            ("2h", timedelta(hours=2)),
            ("30s", timedelta(seconds=30)),
            ("1w", timedelta(weeks=1)),
            ("2 days", timedelta(days=2)),
            ("3600", timedelta(seconds=3600)),
            ("1.5h", timedelta(minutes=90)),
            ("500ms", timedelta(milliseconds=500)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "1 fortnight", "-5m", "d"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestAuthConfig:
    def test_defaults_from_settings(self, settings):
        config = AuthConfig.from_settings(settings)

        assert config.access_ttl == timedelta(days=1)
        assert config.refresh_ttl == timedelta(days=7)
        assert config.algorithm == "HS256"

    def test_secrets_not_in_repr(self, config):
        assert ACCESS_SECRET not in repr(config)
        assert REFRESH_SECRET not in repr(config)

    def test_is_immutable(self, config):
        with pytest.raises(AttributeError):
            config.access_secret = "other"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"ACCESS_SECRET": None},
            {"REFRESH_SECRET": None},
            {"ACCESS_SECRET": ""},
            {"ACCESS_TTL": ""},
            {"REFRESH_TTL": ""},
            {"ACCESS_TTL": "soon"},
            {"REFRESH_TTL": "0s"},
            {"ACCESS_TTL": "500ms"},
            {"REFRESH_TTL": "0.5s"},
            {"JWT_ALGORITHM": "none"},
            {"JWT_ALGORITHM": "RS256"},
            {"JWT_ALGORITHM": "hs256"},
        ],
    )
    def test_incomplete_settings_fail_fast(self, overrides):
        values = {
            "ACCESS_SECRET": ACCESS_SECRET,
            "REFRESH_SECRET": REFRESH_SECRET,
            **overrides,
        }

        with pytest.raises(AuthError) as exc_info:
            AuthConfig.from_settings(Settings(**values))

        assert exc_info.value.code is AuthErrorCode.MISCONFIGURED
        assert exc_info.value.http_status == 500

    def test_identical_secrets_rejected(self):
        with pytest.raises(AuthError) as exc_info:
            AuthConfig(access_secret=ACCESS_SECRET, refresh_secret=ACCESS_SECRET)

        assert exc_info.value.code is AuthErrorCode.MISCONFIGURED

    @pytest.mark.parametrize("algorithm", ["HS256", "HS384", "HS512"])
    def test_hmac_algorithms_accepted(self, algorithm):
        config = AuthConfig(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            algorithm=algorithm,
        )
        assert config.algorithm == algorithm

    def test_one_second_ttl_accepted(self):
        config = AuthConfig(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            access_ttl=timedelta(seconds=1),
        )
        assert config.access_ttl == timedelta(seconds=1)
