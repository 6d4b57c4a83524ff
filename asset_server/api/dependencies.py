"""Per-application services shared by the route handlers."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from fastapi.templating import Jinja2Templates

from asset_server.adapters.bundle.base import AbstractBundleSource
from asset_server.adapters.rate_limit.base import AbstractRateLimiter
from asset_server.core.server_config import ServerConfig
from asset_server.services.asset_resolver import AssetResolver
from asset_server.services.stylesheet_service import CssCompositor


@dataclass(frozen=True)
class AssetServices:
    """Collaborators built once per app from its ServerConfig."""

    config: ServerConfig
    resolver: AssetResolver
    compositor: CssCompositor
    limiter: AbstractRateLimiter
    bundle: AbstractBundleSource
    templates: Jinja2Templates


def get_services(request: Request) -> AssetServices:
    """FastAPI dependency returning the services of the serving app."""
    return request.app.state.assets
