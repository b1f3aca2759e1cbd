# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the booking
core. Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.order_lock.backend)
    'memory'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Booking database configuration.

    The booking database stores orders, students, courses, packs and
    the company directory.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "booking"
    password: SecretStr = SecretStr("booking_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "booking"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for distributed order locks.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0
    max_connections: int = 50

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        if pwd:
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class LockSettings(BaseSettings):
    """Per-order lock configuration.

    Attributes:
        backend: "memory" serializes within one process, "redis" across
            every process sharing the Redis instance.
        acquire_timeout: Seconds to wait for an order lock. None waits
            until the current holder releases it.
        lease_timeout: Seconds a Redis lock survives if its holder dies
            without releasing it.
        key_prefix: Prefix of Redis lock keys.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDER_LOCK_",
        extra="ignore",
    )

    backend: Literal["memory", "redis"] = "memory"
    acquire_timeout: float | None = None
    lease_timeout: float = 60.0
    key_prefix: str = "lock:order"


class PaymentProviderSettings(BaseSettings):
    """Payment provider configuration used to expire checkout sessions.

    Attributes:
        base_url: Base URL of the provider API.
        api_key: Secret API key sent as a bearer token.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_",
        extra="ignore",
    )

    base_url: str = "https://api.stripe.com/v1"
    api_key: SecretStr = SecretStr("")
    timeout: float = 10.0

    @property
    def auth_headers(self) -> dict[str, str]:
        """Build authentication headers for API requests."""
        return {"Authorization": f"Bearer {self.api_key.get_secret_value()}"}


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        db: Booking database settings.
        redis: Redis settings.
        order_lock: Per-order lock settings.
        payment: Payment provider settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    order_lock: LockSettings = Field(default_factory=LockSettings)
    payment: PaymentProviderSettings = Field(default_factory=PaymentProviderSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production without a payment API key.
        """
        if self.environment == "production":
            if not self.payment.api_key.get_secret_value():
                raise ValueError(
                    "Payment API key must be set in production. "
                    "Set PAYMENT_API_KEY environment variable."
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
