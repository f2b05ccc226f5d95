"""Configuration for Finpath.

Pydantic Settings-based configuration with environment variable support and
defaults suitable for local development.

Usage:
    from finpath_core.config import FinpathConfig, configure_logging

    # Load from environment variables and .env file
    config = FinpathConfig()
    configure_logging(config)

    # Account provider settings
    print(config.provider.cache_ttl_seconds)
"""

import logging

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderConfig(BaseSettings):
    """Account data provider settings.

    Environment Variables:
        FINPATH_PROVIDER_ENABLED: Fetch account balances when a token is supplied
        FINPATH_PROVIDER_CACHE_TTL_SECONDS: Seconds a fetched snapshot stays cached
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPATH_PROVIDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(
        default=True,
        description="Fetch account balances when an access token is supplied",
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0,
        description="Seconds a fetched account snapshot is reused",
    )


class FinpathConfig(BaseSettings):
    """Root configuration.

    Environment Variables:
        FINPATH_ENV: Environment name (development, staging, production, test)
        FINPATH_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        FINPATH_JSON_LOGS: Render log events as JSON instead of console text

    Example:
        config = FinpathConfig(log_level="debug", provider=ProviderConfig(cache_ttl_seconds=60))
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log events as JSON",
    )

    provider: ProviderConfig = Field(default_factory=ProviderConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def configure_logging(config: FinpathConfig) -> None:
    """Point structlog at the configured level and renderer.

    Production defaults to JSON output; elsewhere the console renderer is
    used unless ``json_logs`` is set.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.json_logs or config.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        cache_logger_on_first_use=False,
    )
