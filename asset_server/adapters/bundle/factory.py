"""Factory pattern for choosing the client bundle source."""

from pathlib import Path

from asset_server.adapters.bundle.base import AbstractBundleSource
from asset_server.adapters.bundle.file_bundle import PrebuiltBundleSource
from asset_server.adapters.bundle.http_bundle import RemoteBundleSource


def create_bundle_source(
    *,
    bundle_path: Path,
    bundler_url: str | None = None,
    timeout_seconds: float = 30.0,
) -> AbstractBundleSource:
    """Instantiate the bundle source for /app.js.

    An external bundler, when configured, takes precedence over the
    prebuilt file.

    Args:
        bundle_path: Prebuilt bundle location.
        bundler_url: Optional bundler service endpoint.
        timeout_seconds: Bundler request timeout.

    Returns:
        AbstractBundleSource: Configured bundle source.
    """
    if bundler_url:
        return RemoteBundleSource(bundler_url, timeout_seconds=timeout_seconds)
    return PrebuiltBundleSource(bundle_path)
