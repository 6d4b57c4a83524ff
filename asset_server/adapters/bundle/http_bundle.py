"""External bundler/transform service client."""

import logging

import httpx

from asset_server.adapters.bundle.base import AbstractBundleSource
from asset_server.core.errors import BundleAppError

logger = logging.getLogger(__name__)


class RemoteBundleSource(AbstractBundleSource):
    """Fetch the compiled bundle from an HTTP bundler service.

    Uses httpx with async support; one request per /app.js request, so the
    bundler decides about its own caching and incremental rebuilds.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the bundler client.

        Args:
            url: Endpoint returning the compiled bundle on GET.
            timeout_seconds: Timeout for requests in seconds.
            transport: Optional httpx transport (tests inject a mock).
        """
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch(self) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "bundle.bundler_error",
                extra={"url": self.url, "upstream_status": exc.response.status_code},
            )
            raise BundleAppError(
                code="bundler_failed",
                message=f"Bundler responded with HTTP {exc.response.status_code}",
                details={"url": self.url, "http_status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "bundle.bundler_unreachable",
                extra={"url": self.url, "error_type": type(exc).__name__},
            )
            raise BundleAppError(
                code="bundler_unreachable",
                message="Bundler could not be reached",
                details={"url": self.url},
            ) from exc

        return response.content
