# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
student records engine. Settings are loaded from environment variables
with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.records.ranking_policy)
    'positional'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_PASSWORD = "records_password"


class DatabaseSettings(BaseSettings):
    """Records database configuration.

    The records database holds the user directory, batch memberships,
    fee ledger rows and test score records.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        url_override: Full connection URL; takes precedence over components.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        auto_migrate: Apply pending migrations on application startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    user: str = "records"
    password: SecretStr = SecretStr(DEFAULT_DATABASE_PASSWORD)
    host: str = "localhost"
    port: int = 5432
    database: str = "student_records"
    url_override: str | None = Field(
        default=None,
        validation_alias="DATABASE_URL",
    )
    pool_size: int = 10
    max_overflow: int = 20
    auto_migrate: bool = False

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Check whether the configured backend is SQLite."""
        return self.url.startswith("sqlite")


class RecordSettings(BaseSettings):
    """Behaviour of the record consistency and analytics engine.

    Attributes:
        operation_timeout_seconds: Default deadline for a single operation.
        ranking_policy: How tied scores are ranked. "positional" gives
            every record a distinct sequential rank, "competition" gives
            tied scores the same rank ("1224").
        enforce_single_membership: Reject adding a student who already
            belongs to a batch.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECORDS_",
        extra="ignore",
    )

    operation_timeout_seconds: float = Field(default=10.0, gt=0)
    ranking_policy: Literal["positional", "competition"] = "positional"
    enforce_single_membership: bool = False


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        title: OpenAPI title.
        version: API version reported by health checks.
        docs_enabled: Whether to expose /docs and /redoc.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    title: str = "Student Records API"
    version: str = "0.1.0"
    docs_enabled: bool = True


class CORSSettings(BaseSettings):
    """CORS configuration.

    Attributes:
        allowed_origins: Origins allowed to call the API.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        records: Record engine settings.
        api: API server settings.
        cors: CORS settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    records: RecordSettings = Field(default_factory=RecordSettings)
    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production" and not self.database.url_override:
            if self.database.password.get_secret_value() == DEFAULT_DATABASE_PASSWORD:
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DATABASE_PASSWORD or DATABASE_URL environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
