"""Prebuilt bundle read from disk."""

import logging
from pathlib import Path

import anyio

from asset_server.adapters.bundle.base import AbstractBundleSource
from asset_server.core.errors import AssetReadAppError

logger = logging.getLogger(__name__)


class PrebuiltBundleSource(AbstractBundleSource):
    """Serve a bundle an external build step already wrote to disk.

    The file is re-read per request, so a watcher rebuilding it in the
    background is picked up immediately.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch(self) -> bytes:
        try:
            return await anyio.Path(self.path).read_bytes()
        except OSError as exc:
            logger.error(
                "bundle.read_failed",
                extra={"path": str(self.path), "error_type": type(exc).__name__},
            )
            raise AssetReadAppError(
                code="bundle_unreadable",
                message="Client bundle could not be read",
                details={"path": str(self.path)},
            ) from exc
