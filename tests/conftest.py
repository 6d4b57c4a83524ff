"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins APP_ENV to testing before settings are imported and provides a
throwaway site layout (static root, shell template, bundle) per test.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from asset_server.core.app_factory import create_app
from asset_server.core.server_config import ServerConfig
from asset_server.services.stylesheet_service import StylesheetSource

SHELL_HTML = (
    "<!DOCTYPE html><html><head>"
    '<link rel="stylesheet" href="{{ stylesheet }}"></head>'
    '<body>SPA shell<script src="{{ script }}"></script></body></html>'
)
BASE_CSS = "body { color: #222; }"


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Create a minimal site: www/ static root and client/ shell + bundle."""
    www = tmp_path / "www"
    www.mkdir()
    (www / "style.css").write_text(BASE_CSS)
    (www / "robots.txt").write_text("User-agent: *\n")
    (www / "shared.txt").write_text("default copy")

    client = tmp_path / "client"
    client.mkdir()
    (client / "index.html").write_text(SHELL_HTML)
    (client / "app.js").write_text("console.log('bundle')")
    return tmp_path


@pytest.fixture
def make_config(site: Path) -> Callable[..., ServerConfig]:
    """Factory building a ServerConfig rooted at the test site."""

    def _make(**overrides: Any) -> ServerConfig:
        params: dict[str, Any] = {
            "static_root": site / "www",
            "template_dir": site / "client",
            "stylesheets": StylesheetSource(base_path=site / "www" / "style.css"),
        }
        params.update(overrides)
        return ServerConfig(**params)

    return _make


@pytest.fixture
def make_client(make_config: Callable[..., ServerConfig]) -> Callable[..., TestClient]:
    """Factory building a TestClient around a freshly created app."""

    def _make(**overrides: Any) -> TestClient:
        return TestClient(create_app(make_config(**overrides)))

    return _make
