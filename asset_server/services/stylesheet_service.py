"""Stylesheet composition service.

Concatenates the bundled base stylesheet with operator-supplied custom
stylesheets and optionally mirrors the result for right-to-left layouts.
Sources are re-read on every call so edits show up without a restart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from asset_server.core.errors import AssetReadAppError
from asset_server.utils import css_rtl

logger = logging.getLogger(__name__)

SEPARATOR = b"\n"


@dataclass(frozen=True)
class StylesheetSource:
    """Ordered stylesheet paths: the base first, then custom files."""

    base_path: Path
    custom_paths: tuple[Path, ...] = field(default_factory=tuple)

    @property
    def paths(self) -> tuple[Path, ...]:
        return (self.base_path, *self.custom_paths)


class CssCompositor:
    """Compose the served stylesheet from its configured sources."""

    def __init__(self, source: StylesheetSource) -> None:
        self._source = source

    @property
    def source(self) -> StylesheetSource:
        return self._source

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            logger.error(
                "stylesheet.read_failed",
                extra={"path": str(path), "error_type": type(exc).__name__},
            )
            raise AssetReadAppError(
                code="stylesheet_unreadable",
                message=f"Stylesheet {path.name!r} could not be read",
                details={"path": str(path)},
            ) from exc

    def compose(self) -> bytes:
        """Concatenate all sources in order, separated by a newline.

        Raises:
            AssetReadAppError: If any source is missing or unreadable; no
                partial stylesheet is ever returned.
        """
        parts = [self._read(path) for path in self._source.paths]
        composed = SEPARATOR.join(parts)
        logger.debug(
            "stylesheet.composed",
            extra={"sources": len(parts), "size_bytes": len(composed)},
        )
        return composed

    def compose_rtl(self) -> bytes:
        """Compose, then mirror left/right-sensitive declarations."""
        # surrogateescape keeps non UTF-8 bytes intact through the text rewrite
        text = self.compose().decode("utf-8", errors="surrogateescape")
        return css_rtl.transform(text).encode("utf-8", errors="surrogateescape")
