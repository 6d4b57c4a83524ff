"""Routes whose content is generated per request.

- ``/``: the HTML shell that boots the single-page application
- ``/app.js``: the compiled client bundle (delegated to a bundle source)
- ``/style.css`` and ``/style-rtl.css``: composed stylesheets

These routes take precedence over any override asset or static file.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse

from asset_server.api.dependencies import AssetServices, get_services

router = APIRouter(tags=["Generated"])

CSS_MEDIA_TYPE = "text/css"

# APIRoute does not add HEAD implicitly
READ_METHODS = ["GET", "HEAD"]

Services = Annotated[AssetServices, Depends(get_services)]


def render_shell(request: Request, services: AssetServices) -> HTMLResponse:
    """Render the SPA shell; used for ``/`` and as the resolution fallback."""
    return services.templates.TemplateResponse(
        request,
        services.config.shell_template,
        {
            "script": "/app.js",
            "stylesheet": "/style.css",
            "stylesheet_rtl": "/style-rtl.css",
        },
    )


@router.api_route("/", methods=READ_METHODS, response_class=HTMLResponse)
def home(request: Request, services: Services) -> HTMLResponse:
    return render_shell(request, services)


@router.api_route("/app.js", methods=READ_METHODS)
async def client_bundle(services: Services) -> Response:
    """Serve the compiled client bundle.

    Raises:
        AssetReadAppError: Prebuilt bundle missing (500).
        BundleAppError: External bundler failed (502).
    """
    content = await services.bundle.fetch()
    return Response(content=content, media_type=services.bundle.media_type)


@router.api_route("/style.css", methods=READ_METHODS)
def stylesheet(services: Services) -> Response:
    """Base stylesheet followed by the custom stylesheets, newline separated."""
    return Response(content=services.compositor.compose(), media_type=CSS_MEDIA_TYPE)


@router.api_route("/style-rtl.css", methods=READ_METHODS)
def stylesheet_rtl(services: Services) -> Response:
    """Composed stylesheet mirrored for right-to-left layouts."""
    return Response(content=services.compositor.compose_rtl(), media_type=CSS_MEDIA_TYPE)
