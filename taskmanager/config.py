"""Configuration loading for the task manager.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Task store configuration
    store_backend: Literal["memory", "sqlite", "postgresql"] = Field(
        default="sqlite",
        description="Task store backend type",
    )
    store_sqlite_path: str = Field(
        default="./data/tasks.db",
        description="SQLite database file path",
    )
    store_pool_size: int = Field(
        default=5,
        description="Maximum number of pooled database connections",
    )
    database_url: str = Field(
        default="",
        description="PostgreSQL connection URL",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["http", "cli"] = Field(
        default="http",
        description="Run mode",
    )

    # HTTP configuration
    http_host: str = Field(
        default="0.0.0.0",
        description="Host to listen on for the HTTP server",
    )
    http_port: int = Field(
        default=8080,
        description="Port to listen on for the HTTP server",
    )
    http_api_key: str = Field(
        default="",
        description="API key for HTTP authentication (required for production)",
    )
    http_require_auth: bool = Field(
        default=False,
        description="Require API key authentication for task endpoints",
    )
    http_max_body_bytes: int = Field(
        default=1024 * 1024,
        description="Largest accepted HTTP request body in bytes",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("store_pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        """Ensure pool size is positive."""
        if v <= 0:
            raise ValueError("store_pool_size must be positive")
        return v

    @field_validator("http_port")
    @classmethod
    def validate_http_port(cls, v: int) -> int:
        """Ensure HTTP port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("http_port must be between 1 and 65535")
        return v

    @field_validator("http_max_body_bytes")
    @classmethod
    def validate_max_body_bytes(cls, v: int) -> int:
        """Ensure body size limit is positive."""
        if v <= 0:
            raise ValueError("http_max_body_bytes must be positive")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Ensure a PostgreSQL URL uses a postgres scheme when given."""
        if v and not v.startswith(("postgresql://", "postgres://")):
            raise ValueError(
                "database_url must start with postgresql:// or postgres://"
            )
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
