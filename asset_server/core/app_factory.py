"""Application factory for the FastAPI app.

Centralizes app construction (services, middleware, handlers, routers) so
tests can build independent apps from independent ServerConfig objects.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from asset_server.adapters.bundle.factory import create_bundle_source
from asset_server.api.dependencies import AssetServices
from asset_server.api.routes import assets_router, generated_router
from asset_server.core.config import settings
from asset_server.core.exception_handlers import setup_exception_handlers
from asset_server.core.logging import configure_logging
from asset_server.core.middleware import (
    CorsHeaderMiddleware,
    NoScriptRedirectMiddleware,
    request_id_middleware,
)
from asset_server.core.rate_limit import build_rate_limiter
from asset_server.core.server_config import ServerConfig, load_server_config
from asset_server.services.asset_resolver import AssetResolver
from asset_server.services.stylesheet_service import CssCompositor


def build_services(config: ServerConfig) -> AssetServices:
    """Wire the per-app collaborators for a configuration."""
    return AssetServices(
        config=config,
        resolver=AssetResolver(config.override_rules, config.static_root),
        compositor=CssCompositor(config.stylesheets),
        limiter=build_rate_limiter(
            limit=config.rate_limit_requests,
            window_seconds=config.rate_limit_window_seconds,
        ),
        bundle=create_bundle_source(
            bundle_path=config.resolved_bundle_path,
            bundler_url=config.bundler_url,
            timeout_seconds=config.bundler_timeout_seconds,
        ),
        templates=Jinja2Templates(directory=str(config.template_dir)),
    )


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        config: Server configuration; loaded from settings when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.

    Raises:
        ConfigurationAppError: If the configuration cannot be loaded.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    if config is None:
        config = load_server_config(settings.server)

    # Interactive docs would shadow SPA deep links such as /docs
    app = FastAPI(
        title="Asset Server",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.assets = build_services(config)

    # Middleware (last registered runs first)
    if config.noscript_redirect_base:
        app.middleware("http")(NoScriptRedirectMiddleware(config.noscript_redirect_base))
    if config.cors_origin:
        app.middleware("http")(CorsHeaderMiddleware(config.cors_origin))
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers: generated routes first, the catch-all asset route last
    app.include_router(generated_router)
    app.include_router(assets_router)

    return app
