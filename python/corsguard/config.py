"""Application settings loaded from environment variables.

Environment Configuration:
    CORSGUARD_ENV: Deployment environment (local | test | staging | prod)
    LOG_JSON: Emit JSON logs (default true); false gives console output

CORS Policy Configuration:
    CORS_ALLOWED_ORIGINS: Comma-separated origins, or "*" for any origin
    CORS_ALLOW_NULL_ORIGIN: Also allow the opaque "null" origin (only with "*")
    CORS_ALLOWED_METHODS: Comma-separated methods (default GET,HEAD,POST)
    CORS_ALLOWED_HEADERS: Comma-separated request headers
    CORS_EXPOSED_HEADERS: Comma-separated response headers
    CORS_ALLOW_CREDENTIALS: Allow credentialed requests (default false)
    CORS_PREFER_WILDCARD: Answer "*" instead of echoing the origin when possible
    CORS_MAX_AGE_S: Preflight cache lifetime in seconds (unset = no header)

Note: the policy built from these settings is immutable. Changing the
environment requires a restart (or clear_settings_cache() in tests).
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from corsguard.builder import CorsBuilder
from corsguard.policy import AnyOrigin, CorsPolicy

ANY_ORIGIN = "*"


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


def split_csv(value: str | None) -> list[str]:
    """Parse a comma-separated setting into a list, dropping empty entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - "*" cannot be mixed with explicit origins
    - CORS_ALLOW_NULL_ORIGIN requires CORS_ALLOWED_ORIGINS="*"
    - "*" with credentials is refused in staging and prod
    - CORS_MAX_AGE_S must be >= 0
    - Methods and header names must be valid HTTP tokens (checked by the builder)
    """

    corsguard_env: Environment = Field(default=Environment.LOCAL, alias="CORSGUARD_ENV")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    cors_allowed_origins: str = Field(default="", alias="CORS_ALLOWED_ORIGINS")
    cors_allow_null_origin: bool = Field(default=False, alias="CORS_ALLOW_NULL_ORIGIN")
    cors_allowed_methods: str = Field(default="GET,HEAD,POST", alias="CORS_ALLOWED_METHODS")
    cors_allowed_headers: str = Field(default="", alias="CORS_ALLOWED_HEADERS")
    cors_exposed_headers: str = Field(default="", alias="CORS_EXPOSED_HEADERS")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_prefer_wildcard: bool = Field(default=False, alias="CORS_PREFER_WILDCARD")
    cors_max_age_s: int | None = Field(default=None, alias="CORS_MAX_AGE_S")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_cors_settings(self) -> "Settings":
        """Reject contradictory CORS settings."""
        origins = self.origin_list
        if ANY_ORIGIN in origins and len(origins) > 1:
            raise ValueError("CORS_ALLOWED_ORIGINS cannot mix '*' with explicit origins")

        if self.cors_allow_null_origin and not self.allows_any_origin:
            raise ValueError(
                "CORS_ALLOW_NULL_ORIGIN requires CORS_ALLOWED_ORIGINS='*'; "
                "list 'null' explicitly to allow it for specific origins"
            )

        if self.cors_max_age_s is not None and self.cors_max_age_s < 0:
            raise ValueError("CORS_MAX_AGE_S must be >= 0")

        if self.corsguard_env in (Environment.STAGING, Environment.PROD):
            if self.allows_any_origin and self.cors_allow_credentials:
                raise ValueError(
                    f"CORS_ALLOWED_ORIGINS='*' with CORS_ALLOW_CREDENTIALS is not allowed "
                    f"for CORSGUARD_ENV={self.corsguard_env.value}"
                )

        # Surface builder errors (invalid tokens) at load time
        self.to_policy()

        return self

    @property
    def origin_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return split_csv(self.cors_allowed_origins)

    @property
    def allows_any_origin(self) -> bool:
        return self.origin_list == [ANY_ORIGIN]

    def to_policy(self) -> CorsPolicy:
        """Resolve these settings into an immutable CorsPolicy.

        Raises:
            PolicyConfigError: If a method or header name is invalid.
        """
        builder = CorsBuilder()

        if self.allows_any_origin:
            builder.allow_origins(AnyOrigin(allow_null=self.cors_allow_null_origin))
        else:
            builder.allow_origins(self.origin_list)

        builder.allow_methods(split_csv(self.cors_allowed_methods))
        builder.allow_headers(split_csv(self.cors_allowed_headers))
        builder.expose_headers(split_csv(self.cors_exposed_headers))
        builder.allow_credentials(self.cors_allow_credentials)
        builder.prefer_wildcard(self.cors_prefer_wildcard)
        if self.cors_max_age_s is not None:
            builder.max_age(self.cors_max_age_s)

        return builder.build()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
