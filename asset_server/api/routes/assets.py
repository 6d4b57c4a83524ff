"""Catch-all asset route: override rules, static root, SPA fallback."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import FileResponse

from asset_server.api.dependencies import AssetServices, get_services
from asset_server.api.routes.generated import READ_METHODS, render_shell
from asset_server.core.errors import AssetReadAppError
from asset_server.core.rate_limit import enforce_rate_limit
from asset_server.services.asset_resolver import ResolutionKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assets"])

# Other methods never read files; they only get the shell
SHELL_METHODS = ["POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{asset_path:path}", methods=READ_METHODS + SHELL_METHODS)
def serve_asset(
    asset_path: str,
    request: Request,
    services: Annotated[AssetServices, Depends(get_services)],
) -> Response:
    """Answer any path not claimed by a generated route.

    Single-file overrides pass the per-client rate limit first and always
    carry the RateLimit-* headers. Directory overrides and the default
    static root are served without limiting. Unmatched paths get the SPA
    shell with status 200 so client-side routing can take over, as do
    requests with any method other than GET or HEAD.

    Raises:
        HTTPException: 429 when the override rate limit is exhausted.
        AssetReadAppError: Registered override file vanished (500).
    """
    if request.method not in READ_METHODS:
        return render_shell(request, services)

    resolution = services.resolver.resolve("/" + asset_path)

    if resolution.kind is ResolutionKind.SHELL:
        return render_shell(request, services)

    headers: dict[str, str] = {}
    if resolution.rate_limited:
        headers = enforce_rate_limit(request, services.limiter)

    file_path = resolution.file_path
    if file_path is None or not file_path.is_file():
        raise AssetReadAppError(
            code="asset_unavailable",
            message="Registered asset is no longer readable",
            details={"path": str(file_path)},
        )

    logger.debug(
        "asset.served",
        extra={"kind": resolution.kind.value, "asset_path": str(file_path)},
    )
    return FileResponse(file_path, headers=headers)
