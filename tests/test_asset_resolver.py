"""Tests for request path resolution precedence."""

from pathlib import Path

import pytest

from asset_server.services.asset_resolver import AssetResolver, ResolutionKind
from asset_server.services.override_registry import AssetKind, AssetRule
from asset_server.utils.static_paths import StaticTree


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    www = tmp_path / "www"
    (www / "img").mkdir(parents=True)
    (www / "logo.png").write_bytes(b"default logo")
    (www / "img" / "bg.png").write_bytes(b"bg")
    (www / ".env").write_text("SECRET=1")

    custom = tmp_path / "custom"
    (custom / "img").mkdir(parents=True)
    (custom / "logo.png").write_bytes(b"custom logo")
    (custom / "img" / "hero.png").write_bytes(b"hero")
    (custom / "img" / "index.html").write_text("gallery")

    (tmp_path / "secret.txt").write_text("outside")
    return {"root": tmp_path, "www": www, "custom": custom}


def _file_rule(path: Path) -> AssetRule:
    return AssetRule(public_name=path.name, source_path=str(path), kind=AssetKind.FILE)


def _dir_rule(path: Path) -> AssetRule:
    return AssetRule(public_name=path.name, source_path=str(path), kind=AssetKind.DIRECTORY)


def test_override_file_wins_over_static_root(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_file_rule(layout["custom"] / "logo.png")], layout["www"])

    resolution = resolver.resolve("/logo.png")

    assert resolution.kind is ResolutionKind.OVERRIDE_FILE
    assert resolution.file_path == layout["custom"] / "logo.png"
    assert resolution.rate_limited is True


def test_override_file_only_answers_exact_path(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_file_rule(layout["custom"] / "logo.png")], layout["www"])

    assert resolver.resolve("/logo.png/extra").kind is ResolutionKind.SHELL
    assert resolver.resolve("/logo.png/").kind is ResolutionKind.OVERRIDE_FILE


def test_directory_override_serves_subtree_without_limit(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_dir_rule(layout["custom"] / "img")], layout["www"])

    resolution = resolver.resolve("/img/hero.png")

    assert resolution.kind is ResolutionKind.OVERRIDE_DIRECTORY
    assert resolution.file_path == (layout["custom"] / "img" / "hero.png").resolve()
    assert resolution.rate_limited is False


def test_directory_override_miss_falls_through_to_static_root(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_dir_rule(layout["custom"] / "img")], layout["www"])

    resolution = resolver.resolve("/img/bg.png")

    assert resolution.kind is ResolutionKind.STATIC
    assert resolution.file_path == (layout["www"] / "img" / "bg.png").resolve()


def test_directory_request_serves_index(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_dir_rule(layout["custom"] / "img")], layout["www"])

    resolution = resolver.resolve("/img/")

    assert resolution.file_path == (layout["custom"] / "img" / "index.html").resolve()


def test_first_registered_rule_wins(layout: dict[str, Path], tmp_path: Path) -> None:
    other = tmp_path / "other"
    other.mkdir()
    (other / "logo.png").write_bytes(b"other logo")
    resolver = AssetResolver(
        [_file_rule(other / "logo.png"), _file_rule(layout["custom"] / "logo.png")],
        layout["www"],
    )

    assert resolver.resolve("/logo.png").file_path == other / "logo.png"


def test_unmatched_path_falls_back_to_shell(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([], layout["www"])

    resolution = resolver.resolve("/settings/profile")

    assert resolution.kind is ResolutionKind.SHELL
    assert resolution.file_path is None


def test_dotfiles_are_not_served(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([], layout["www"])

    assert resolver.resolve("/.env").kind is ResolutionKind.SHELL


def test_tree_rejects_traversal(layout: dict[str, Path]) -> None:
    tree = StaticTree(layout["www"])

    assert tree.find(["..", "secret.txt"]) is None
    assert tree.find(["img", "..", "..", "secret.txt"]) is None


def test_tree_finds_nested_file(layout: dict[str, Path]) -> None:
    assert StaticTree(layout["www"]).find(["img", "bg.png"]) == layout["www"] / "img" / "bg.png"


def test_tree_misses_on_missing_root(tmp_path: Path) -> None:
    assert StaticTree(tmp_path / "gone").find(["logo.png"]) is None


def test_overlong_segment_falls_back_to_shell(layout: dict[str, Path]) -> None:
    resolver = AssetResolver([_dir_rule(layout["custom"] / "img")], layout["www"])

    assert resolver.resolve("/" + "a" * 300).kind is ResolutionKind.SHELL
    assert resolver.resolve("/img/" + "b" * 300).kind is ResolutionKind.SHELL


def test_directory_override_follows_symlinks_out_of_tree(layout: dict[str, Path]) -> None:
    shared = layout["root"] / "shared-assets" / "banner.png"
    shared.parent.mkdir()
    shared.write_bytes(b"banner")
    (layout["custom"] / "img" / "banner.png").symlink_to(shared)
    resolver = AssetResolver([_dir_rule(layout["custom"] / "img")], layout["www"])

    resolution = resolver.resolve("/img/banner.png")

    assert resolution.kind is ResolutionKind.OVERRIDE_DIRECTORY
    assert resolution.file_path == layout["custom"] / "img" / "banner.png"
