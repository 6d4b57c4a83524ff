"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Server option names mirror the plain environment variables operators already
use (PORT, CORS_ALLOW, CUSTOM_ASSETS, ...), so ServerSettings has no prefix.
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

# Bundled default assets shipped with the package
PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_WWW_DIR = PACKAGE_ROOT / "www"
DEFAULT_CLIENT_DIR = PACKAGE_ROOT / "client"

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


def split_whitespace_list(raw: str | None) -> list[str]:
    """Split a whitespace-separated option into its non-empty items.

    Examples:
        >>> split_whitespace_list("logo.png  assets/*.svg")
        ['logo.png', 'assets/*.svg']
        >>> split_whitespace_list(None)
        []
    """
    if not raw:
        return []
    return raw.split()


def _build_server_settings() -> "ServerSettings":
    """Build server settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    Static type checkers treat fields as constructor arguments, which is not
    how BaseSettings is intended to be used.
    """

    return ServerSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()  # type: ignore[call-arg]


class ServerSettings(BaseSettings):
    """Asset server configuration."""

    bind_host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        5000,
        description="TCP port the HTTP server listens on",
        ge=0,
        le=65535,
    )
    cors_allow: str | None = Field(
        None,
        description="Fixed Access-Control-Allow-Origin value added to every response",
    )
    noscript_redir_base: str | None = Field(
        None,
        description="Base URL that requests carrying ?nojs are redirected to (303)",
    )
    custom_assets: str = Field(
        "",
        description="Whitespace-separated glob patterns or paths of override assets",
    )
    custom_css: str = Field(
        "",
        description="Whitespace-separated stylesheet paths appended to the base stylesheet",
    )
    www_dir: Path = Field(
        DEFAULT_WWW_DIR,
        description="Default static root; must contain style.css",
    )
    client_dir: Path = Field(
        DEFAULT_CLIENT_DIR,
        description="Directory holding the HTML shell template and prebuilt bundle",
    )
    bundle_path: Path | None = Field(
        None,
        description="Prebuilt client bundle served at /app.js (defaults to client_dir/app.js)",
    )
    bundler_url: str | None = Field(
        None,
        description="External bundler/transform service URL; /app.js is fetched from it when set",
    )
    bundler_timeout_seconds: float = Field(
        30.0,
        description="Timeout for requests to the external bundler",
        gt=0,
    )
    rate_limit_requests: int = Field(
        100,
        description="Maximum requests per window to each single-file override (per client IP)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        15 * 60,
        description="Rate limit window size in seconds",
        ge=1,
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    @property
    def custom_asset_patterns(self) -> list[str]:
        return split_whitespace_list(self.custom_assets)

    @property
    def custom_css_paths(self) -> list[str]:
        return split_whitespace_list(self.custom_css)


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(
        "INFO",
        description="Root log level",
    )
    format: str = Field(
        "json",
        description="Log format: json or plain",
    )
    output: str = Field(
        "stdout",
        description="Log destination: stdout or file",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    server: ServerSettings = Field(default_factory=_build_server_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
