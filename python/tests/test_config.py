"""Tests for application configuration and its resolution into a CORS policy."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from corsguard.config import Environment, Settings, get_settings, split_csv
from corsguard.policy import AnyOrigin, OriginList


def _make_settings(**overrides) -> Settings:
    """Build a Settings instance with test defaults + overrides."""
    defaults = {
        "CORSGUARD_ENV": "test",
        "CORS_ALLOWED_ORIGINS": "http://app.example",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestDefaults:
    def test_defaults(self):
        s = Settings()

        assert s.corsguard_env == Environment.LOCAL
        assert s.log_json is True
        assert s.origin_list == []
        assert s.cors_allow_credentials is False
        assert s.cors_max_age_s is None

    def test_default_policy_denies_everything(self):
        policy = Settings().to_policy()

        assert policy.allowed_origins == OriginList(frozenset())
        assert policy.allowed_methods == frozenset({"GET", "HEAD", "POST"})


class TestToPolicy:
    def test_origin_list(self):
        s = _make_settings(CORS_ALLOWED_ORIGINS="http://a.example, http://b.example,")

        policy = s.to_policy()

        assert policy.allowed_origins == OriginList(
            frozenset({"http://a.example", "http://b.example"})
        )

    def test_any_origin(self):
        policy = _make_settings(CORS_ALLOWED_ORIGINS="*").to_policy()

        assert policy.allowed_origins == AnyOrigin(allow_null=False)

    def test_any_origin_with_null(self):
        policy = _make_settings(
            CORS_ALLOWED_ORIGINS="*", CORS_ALLOW_NULL_ORIGIN=True
        ).to_policy()

        assert policy.allowed_origins == AnyOrigin(allow_null=True)

    def test_full_policy(self):
        policy = _make_settings(
            CORS_ALLOWED_METHODS="GET,PATCH",
            CORS_ALLOWED_HEADERS="Authorization, Content-Type",
            CORS_EXPOSED_HEADERS="X-Total-Count",
            CORS_ALLOW_CREDENTIALS=True,
            CORS_PREFER_WILDCARD=True,
            CORS_MAX_AGE_S=600,
        ).to_policy()

        assert policy.allowed_methods == frozenset({"GET", "PATCH"})
        assert policy.allowed_headers == frozenset({"authorization", "content-type"})
        assert policy.exposed_headers == frozenset({"x-total-count"})
        assert policy.allow_credentials is True
        assert policy.prefer_wildcard is True
        assert policy.max_age == timedelta(seconds=600)


class TestValidation:
    def test_wildcard_mixed_with_origins_rejected(self):
        with pytest.raises(ValidationError, match="cannot mix"):
            _make_settings(CORS_ALLOWED_ORIGINS="*,http://a.example")

    def test_null_flag_requires_wildcard(self):
        with pytest.raises(ValidationError, match="CORS_ALLOW_NULL_ORIGIN"):
            _make_settings(CORS_ALLOW_NULL_ORIGIN=True)

    def test_negative_max_age_rejected(self):
        with pytest.raises(ValidationError, match="CORS_MAX_AGE_S"):
            _make_settings(CORS_MAX_AGE_S=-1)

    def test_invalid_method_rejected(self):
        with pytest.raises(ValidationError, match="allowed_methods"):
            _make_settings(CORS_ALLOWED_METHODS="GET,BAD METHOD")

    def test_invalid_header_rejected(self):
        with pytest.raises(ValidationError, match="allowed_headers"):
            _make_settings(CORS_ALLOWED_HEADERS="x:custom")

    @pytest.mark.parametrize("env", ["staging", "prod"])
    def test_wildcard_with_credentials_rejected_in_deployed_envs(self, env):
        with pytest.raises(ValidationError, match="CORS_ALLOW_CREDENTIALS"):
            _make_settings(
                CORSGUARD_ENV=env, CORS_ALLOWED_ORIGINS="*", CORS_ALLOW_CREDENTIALS=True
            )

    @pytest.mark.parametrize("env", ["local", "test"])
    def test_wildcard_with_credentials_allowed_locally(self, env):
        s = _make_settings(
            CORSGUARD_ENV=env, CORS_ALLOWED_ORIGINS="*", CORS_ALLOW_CREDENTIALS=True
        )

        assert s.to_policy().allow_credentials is True


class TestEnvironment:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://env.example")
        monkeypatch.setenv("CORS_MAX_AGE_S", "30")
        monkeypatch.setenv("LOG_JSON", "false")

        s = get_settings()

        assert s.origin_list == ["http://env.example"]
        assert s.cors_max_age_s == 30
        assert s.log_json is False

    def test_settings_cached(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://first.example")
        first = get_settings()
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://second.example")

        assert get_settings() is first


class TestSplitCsv:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, []),
            ("", []),
            ("a", ["a"]),
            (" a , b ,, c ", ["a", "b", "c"]),
        ],
    )
    def test_split(self, value, expected):
        assert split_csv(value) == expected
