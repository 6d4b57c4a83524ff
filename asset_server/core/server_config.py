"""Immutable per-process server configuration.

``load_server_config`` turns environment settings into a ``ServerConfig``:
override patterns are expanded, stylesheet sources fixed, and bundled paths
validated. Any failure raises ``ConfigurationAppError`` before the server
starts listening.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from asset_server.core.config import ServerSettings, settings
from asset_server.core.errors import ConfigurationAppError
from asset_server.services.override_registry import AssetRule, register
from asset_server.services.stylesheet_service import StylesheetSource

logger = logging.getLogger(__name__)

BASE_STYLESHEET = "style.css"
SHELL_TEMPLATE = "index.html"
PREBUILT_BUNDLE = "app.js"


@dataclass(frozen=True)
class ServerConfig:
    """Everything the router needs, fixed at startup.

    Attributes:
        static_root: Default static asset directory.
        template_dir: Directory holding the HTML shell template.
        stylesheets: Base and custom stylesheet paths, in order.
        override_rules: Override assets, in registration order.
        bundle_path: Prebuilt client bundle.
        bundler_url: External bundler endpoint (takes precedence when set).
        bundler_timeout_seconds: Timeout for bundler requests.
        cors_origin: Fixed Access-Control-Allow-Origin value, if any.
        noscript_redirect_base: Redirect target base for ?nojs requests, if any.
        rate_limit_requests: Requests allowed per window per client.
        rate_limit_window_seconds: Window duration in seconds.
    """

    static_root: Path
    template_dir: Path
    stylesheets: StylesheetSource
    override_rules: tuple[AssetRule, ...] = field(default_factory=tuple)
    bundle_path: Path | None = None
    bundler_url: str | None = None
    bundler_timeout_seconds: float = 30.0
    cors_origin: str | None = None
    noscript_redirect_base: str | None = None
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60
    shell_template: str = SHELL_TEMPLATE

    @property
    def resolved_bundle_path(self) -> Path:
        return self.bundle_path or self.template_dir / PREBUILT_BUNDLE


def _require_dir(path: Path, option: str) -> Path:
    if not path.is_dir():
        raise ConfigurationAppError(
            code="directory_missing",
            message=f"{option} does not point to a directory: {path}",
            details={"path": str(path), "hint": f"Set {option} to an existing directory"},
        )
    return path


def _require_file(path: Path, option: str) -> Path:
    if not path.is_file():
        raise ConfigurationAppError(
            code="file_missing",
            message=f"{option} is missing required file: {path}",
            details={"path": str(path)},
        )
    return path


def load_server_config(server_settings: ServerSettings | None = None) -> ServerConfig:
    """Build the immutable server configuration from settings.

    Args:
        server_settings: Optional settings; defaults to global settings if omitted.

    Returns:
        ServerConfig: Validated configuration with expanded override rules.

    Raises:
        ConfigurationAppError: If a directory/template/base stylesheet is
            missing or an override match cannot be inspected.
    """
    cfg = server_settings or settings.server

    static_root = _require_dir(Path(cfg.www_dir).resolve(), "WWW_DIR")
    template_dir = _require_dir(Path(cfg.client_dir).resolve(), "CLIENT_DIR")
    _require_file(template_dir / SHELL_TEMPLATE, "CLIENT_DIR")
    base_stylesheet = _require_file(static_root / BASE_STYLESHEET, "WWW_DIR")

    rules = tuple(register(cfg.custom_asset_patterns))
    stylesheets = StylesheetSource(
        base_path=base_stylesheet,
        custom_paths=tuple(Path(p) for p in cfg.custom_css_paths),
    )

    config = ServerConfig(
        static_root=static_root,
        template_dir=template_dir,
        stylesheets=stylesheets,
        override_rules=rules,
        bundle_path=Path(cfg.bundle_path).resolve() if cfg.bundle_path else None,
        bundler_url=cfg.bundler_url or None,
        bundler_timeout_seconds=cfg.bundler_timeout_seconds,
        cors_origin=cfg.cors_allow or None,
        noscript_redirect_base=cfg.noscript_redir_base or None,
        rate_limit_requests=cfg.rate_limit_requests,
        rate_limit_window_seconds=cfg.rate_limit_window_seconds,
    )

    logger.info(
        "config.loaded",
        extra={
            "static_root": str(config.static_root),
            "override_rules": len(config.override_rules),
            "custom_stylesheets": len(config.stylesheets.custom_paths),
            "cors_enabled": config.cors_origin is not None,
            "noscript_redirect_enabled": config.noscript_redirect_base is not None,
            "bundle_source": "remote" if config.bundler_url else "prebuilt",
        },
    )
    return config
