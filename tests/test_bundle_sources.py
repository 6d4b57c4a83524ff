"""Tests for the client bundle sources."""

import asyncio
from pathlib import Path

import httpx
import pytest

from asset_server.adapters.bundle import (
    PrebuiltBundleSource,
    RemoteBundleSource,
    create_bundle_source,
)
from asset_server.core.errors import AssetReadAppError, BundleAppError

BUNDLER_URL = "http://bundler.local/app.js"


def _remote(handler) -> RemoteBundleSource:
    return RemoteBundleSource(BUNDLER_URL, timeout_seconds=1.0, transport=httpx.MockTransport(handler))


def test_factory_prefers_external_bundler(tmp_path: Path) -> None:
    source = create_bundle_source(bundle_path=tmp_path / "app.js", bundler_url=BUNDLER_URL)

    assert isinstance(source, RemoteBundleSource)
    assert source.url == BUNDLER_URL


def test_factory_defaults_to_prebuilt_bundle(tmp_path: Path) -> None:
    source = create_bundle_source(bundle_path=tmp_path / "app.js")

    assert isinstance(source, PrebuiltBundleSource)


def test_prebuilt_bundle_is_reread(tmp_path: Path) -> None:
    bundle = tmp_path / "app.js"
    bundle.write_text("v1")
    source = PrebuiltBundleSource(bundle)

    assert asyncio.run(source.fetch()) == b"v1"
    bundle.write_text("v2")
    assert asyncio.run(source.fetch()) == b"v2"


def test_prebuilt_bundle_missing(tmp_path: Path) -> None:
    with pytest.raises(AssetReadAppError) as exc_info:
        asyncio.run(PrebuiltBundleSource(tmp_path / "app.js").fetch())

    assert exc_info.value.code == "bundle_unreadable"


def test_remote_bundle_returns_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == BUNDLER_URL
        return httpx.Response(200, content=b"console.log(1)")

    assert asyncio.run(_remote(handler).fetch()) == b"console.log(1)"


def test_remote_bundle_error_status() -> None:
    source = _remote(lambda request: httpx.Response(500, content=b"SyntaxError"))

    with pytest.raises(BundleAppError) as exc_info:
        asyncio.run(source.fetch())

    assert exc_info.value.code == "bundler_failed"
    assert exc_info.value.details["http_status"] == 500


def test_remote_bundle_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BundleAppError) as exc_info:
        asyncio.run(_remote(handler).fetch())

    assert exc_info.value.code == "bundler_unreachable"


def test_bundler_failure_maps_to_bad_gateway(make_client, monkeypatch: pytest.MonkeyPatch) -> None:
    client = make_client(bundler_url=BUNDLER_URL)
    bundle = client.app.state.assets.bundle
    monkeypatch.setattr(bundle, "_transport", httpx.MockTransport(lambda r: httpx.Response(503)))

    response = client.get("/app.js")

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "bundler_failed"
