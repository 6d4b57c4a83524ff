"""Tests for settings parsing and startup configuration loading."""

from pathlib import Path

import pytest

from asset_server.core.config import ServerSettings, split_whitespace_list
from asset_server.core.errors import ConfigurationAppError
from asset_server.core.server_config import load_server_config
from asset_server.services.override_registry import AssetKind


class TestSplitWhitespaceList:
    def test_splits_on_any_whitespace(self) -> None:
        assert split_whitespace_list("a.png  b/*.svg\tc") == ["a.png", "b/*.svg", "c"]

    def test_empty_values(self) -> None:
        assert split_whitespace_list("") == []
        assert split_whitespace_list("   ") == []
        assert split_whitespace_list(None) == []


class TestServerSettings:
    def test_reads_plain_environment_names(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("CORS_ALLOW", "*")
        monkeypatch.setenv("NOSCRIPT_REDIR_BASE", "https://nojs.example.org")
        monkeypatch.setenv("CUSTOM_ASSETS", "logo.png  fonts")
        monkeypatch.setenv("CUSTOM_CSS", "theme.css extra.css")

        cfg = ServerSettings()

        assert cfg.port == 8123
        assert cfg.cors_allow == "*"
        assert cfg.noscript_redir_base == "https://nojs.example.org"
        assert cfg.custom_asset_patterns == ["logo.png", "fonts"]
        assert cfg.custom_css_paths == ["theme.css", "extra.css"]

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PORT", "CORS_ALLOW", "NOSCRIPT_REDIR_BASE", "CUSTOM_ASSETS", "CUSTOM_CSS"):
            monkeypatch.delenv(name, raising=False)

        cfg = ServerSettings()

        assert cfg.port == 5000
        assert cfg.cors_allow is None
        assert cfg.custom_asset_patterns == []
        assert cfg.rate_limit_requests == 100
        assert cfg.rate_limit_window_seconds == 900


class TestLoadServerConfig:
    def _settings(self, site: Path, **kwargs) -> ServerSettings:
        return ServerSettings(www_dir=site / "www", client_dir=site / "client", **kwargs)

    def test_builds_immutable_config(self, site: Path) -> None:
        (site / "assets").mkdir()
        (site / "assets" / "logo.png").write_bytes(b"png")
        (site / "theme.css").write_text("a { }")

        config = load_server_config(
            self._settings(
                site,
                custom_assets=f"{site / 'assets' / '*'} {site / 'client'}",
                custom_css=str(site / "theme.css"),
                cors_allow="https://app.example.org",
            )
        )

        assert [(r.public_name, r.kind) for r in config.override_rules] == [
            ("logo.png", AssetKind.FILE),
            ("client", AssetKind.DIRECTORY),
        ]
        assert config.stylesheets.base_path == (site / "www" / "style.css").resolve()
        assert config.stylesheets.custom_paths == (site / "theme.css",)
        assert config.cors_origin == "https://app.example.org"
        assert config.noscript_redirect_base is None
        assert config.resolved_bundle_path == (site / "client").resolve() / "app.js"

        with pytest.raises(AttributeError):
            config.cors_origin = "*"  # type: ignore[misc]

    def test_bundled_defaults_are_valid(self) -> None:
        config = load_server_config(ServerSettings(custom_assets="", custom_css=""))

        assert (config.static_root / "style.css").is_file()
        assert (config.template_dir / "index.html").is_file()

    def test_missing_static_root_is_fatal(self, site: Path) -> None:
        with pytest.raises(ConfigurationAppError) as exc_info:
            load_server_config(ServerSettings(www_dir=site / "nope", client_dir=site / "client"))

        assert exc_info.value.code == "directory_missing"

    def test_missing_shell_template_is_fatal(self, site: Path) -> None:
        (site / "client" / "index.html").unlink()

        with pytest.raises(ConfigurationAppError) as exc_info:
            load_server_config(self._settings(site))

        assert exc_info.value.code == "file_missing"

    def test_missing_base_stylesheet_is_fatal(self, site: Path) -> None:
        (site / "www" / "style.css").unlink()

        with pytest.raises(ConfigurationAppError):
            load_server_config(self._settings(site))

    def test_unreadable_override_is_fatal(self, site: Path) -> None:
        dangling = site / "dangling.png"
        dangling.symlink_to(site / "gone.png")

        with pytest.raises(ConfigurationAppError) as exc_info:
            load_server_config(self._settings(site, custom_assets=str(dangling)))

        assert exc_info.value.code == "override_unreadable"

    def test_unmatched_override_pattern_is_not_an_error(self, site: Path) -> None:
        config = load_server_config(self._settings(site, custom_assets=str(site / "*.nothing")))

        assert config.override_rules == ()
