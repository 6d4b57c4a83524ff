"""Client bundle adapters - abstract over where /app.js comes from."""

from asset_server.adapters.bundle.base import AbstractBundleSource
from asset_server.adapters.bundle.factory import create_bundle_source
from asset_server.adapters.bundle.file_bundle import PrebuiltBundleSource
from asset_server.adapters.bundle.http_bundle import RemoteBundleSource

__all__ = [
    "AbstractBundleSource",
    "PrebuiltBundleSource",
    "RemoteBundleSource",
    "create_bundle_source",
]
