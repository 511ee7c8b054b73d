"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class IdentitySettings(BaseSettings):
    """Identity provider configuration.

    The provider owns user records; this service only reads them and verifies
    the session tokens it issues.
    """

    provider: str = Field(
        "memory",
        description="Identity provider adapter (clerk, memory)",
    )
    api_base_url: str = Field(
        "https://api.clerk.com",
        description="Base URL of the identity provider's backend API",
    )
    secret_key: str | None = Field(
        None,
        description="Backend API secret key (required for the clerk provider)",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Request timeout in seconds for identity lookups",
    )
    session_token_key: str | None = Field(
        None,
        description="PEM public key (or shared secret for HS* algorithms) used to verify session tokens",
    )
    session_token_algorithms: str = Field(
        "RS256",
        description="Comma-separated list of accepted session token algorithms",
    )
    session_token_issuer: str | None = Field(
        None,
        description="Expected 'iss' claim; skipped when unset",
    )
    authorized_parties: str | None = Field(
        None,
        description="Comma-separated list of accepted 'azp' origins; skipped when unset",
    )
    session_cookie_name: str = Field(
        "__session",
        description="Cookie carrying the session token for same-origin browser requests",
    )

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """Post store configuration. No URL means the in-memory store is used."""

    url: str | None = Field(
        None,
        description="SQLAlchemy async database URL (e.g. postgresql+asyncpg://...)",
    )
    pool_size: int = Field(
        5,
        description="Connection pool size (ignored by SQLite)",
        ge=1,
    )
    max_overflow: int = Field(
        10,
        description="Extra connections allowed above pool_size",
        ge=0,
    )
    create_tables: bool = Field(
        False,
        description="Create missing tables on startup",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10_485_760,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    feed_limit: int = Field(
        100,
        description="Maximum number of posts returned by a feed (bounded by the identity lookup cap)",
        ge=1,
        le=100,
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-author rate limiting on post creation",
    )
    rate_limit_requests: int = Field(
        3,
        description="Maximum number of posts allowed per window (per author)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Sliding window size in seconds",
        ge=1,
    )
    rate_limit_backend: str = Field(
        "storage",
        description="Rate limiter backend: storage (limits library) or memory",
    )
    rate_limit_storage_uri: str = Field(
        "async+memory://",
        description="limits storage URI (e.g. async+redis://localhost:6379)",
    )
    rate_limit_key_prefix: str = Field(
        "ratelimit",
        description="Namespace prepended to every rate limit key",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    identity: IdentitySettings = Field(default_factory=IdentitySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
