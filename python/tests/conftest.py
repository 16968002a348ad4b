"""Pytest configuration and fixtures for corsguard tests.

Test isolation strategy:
- Settings are cached with lru_cache; the cache is cleared around every test
- CORS_* / CORSGUARD_* / LOG_JSON variables are removed from the environment
  so the developer's shell cannot leak into settings tests
"""

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from corsguard.app import create_app
from corsguard.builder import CorsBuilder
from corsguard.config import clear_settings_cache
from corsguard.policy import AnyOrigin
from tests.helpers import TEST_ORIGIN


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Start every test from an empty CORS environment and a cold settings cache."""
    for key in list(os.environ):
        if key.startswith(("CORS_", "CORSGUARD_")) or key == "LOG_JSON":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def any_origin_builder() -> CorsBuilder:
    """Builder allowing any non-null origin and POST."""
    return CorsBuilder().allow_origins(AnyOrigin(allow_null=False)).allow_methods(["POST"])


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a test client for the example app with a typical policy."""
    policy = (
        CorsBuilder()
        .allow_origins([TEST_ORIGIN])
        .allow_methods(["GET", "POST"])
        .allow_headers(["Content-Type", "Authorization"])
        .expose_headers(["X-Request-ID"])
        .allow_credentials()
        .max_age(600)
        .build()
    )
    app = create_app(policy)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
