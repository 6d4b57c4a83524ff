from __future__ import annotations

from asset_server.api.routes.assets import router as assets_router
from asset_server.api.routes.generated import router as generated_router

__all__ = ["assets_router", "generated_router"]
