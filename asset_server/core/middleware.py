"""HTTP middleware stages placed in front of asset resolution.

Each stage is an async callable ``(request, call_next) -> Response`` that
either answers the request itself or passes it on:

- ``request_id_middleware``: correlation id, duration header and access log
- ``CorsHeaderMiddleware``: fixed Access-Control-Allow-Origin on every response
- ``NoScriptRedirectMiddleware``: 303 to an external base for ?nojs requests

Usage:
    app.middleware("http")(NoScriptRedirectMiddleware(base_url))
    app.middleware("http")(CorsHeaderMiddleware(origin))
    app.middleware("http")(request_id_middleware)

Starlette runs the last registered stage first.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from asset_server.core.config import settings
from asset_server.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

NOSCRIPT_QUERY_PARAM = "nojs"


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID propagation and access logging.

    At DEBUG level the incoming headers and query string are logged too;
    credentials among them are masked by ``SensitiveDataFilter``.

    If the client provides an X-Request-ID header (configurable via
    LOG_REQUEST_ID_HEADER), that value is used. Otherwise, a new UUID is
    generated. The ID is propagated back in the response headers and stored
    in contextvars for log correlation.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The response from the next handler with request_id and
            duration headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    logger.debug(
        "http.request",
        extra={
            "method": request.method,
            "path": request.url.path,
            "query_string": request.url.query,
            "headers": dict(request.headers),
        },
    )
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.access",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client": request.client.host if request.client else None,
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


class CorsHeaderMiddleware:
    """Set a fixed Access-Control-Allow-Origin header on every response."""

    def __init__(self, origin: str) -> None:
        self.origin = origin

    async def __call__(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = self.origin
        return response


class NoScriptRedirectMiddleware:
    """Send script-less clients to an external rendering of the same path.

    Any request carrying the ``nojs`` query parameter, even without a value,
    is answered with 303 See Other to ``base_url + path`` before resolution.
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    async def __call__(self, request: Request, call_next) -> Response:
        if NOSCRIPT_QUERY_PARAM not in request.query_params:
            return await call_next(request)

        location = self.base_url + request.url.path
        logger.info(
            "noscript.redirect",
            extra={"path": request.url.path, "location": location},
        )
        return RedirectResponse(location, status_code=303)
