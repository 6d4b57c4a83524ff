"""Static directory trees looked up through Starlette's ``StaticFiles``.

The asset route needs to know whether a tree has a file *before* answering,
so a miss can fall through to the next tier. ``StaticTree`` asks
``StaticFiles.lookup_path`` for the match instead of mounting the app.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Sequence

from starlette.staticfiles import StaticFiles

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


def _is_hidden_or_unsafe(segment: str) -> bool:
    return segment.startswith(".") or "\\" in segment or "\x00" in segment


class StaticTree:
    """One directory served as a static tree.

    Dotfiles never match and a directory serves its ``index.html``. Symlinks
    inside the tree are followed; ``..`` cannot leave it.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self._files = StaticFiles(
            directory=self.directory,
            html=True,
            check_dir=False,
            follow_symlink=True,
        )

    def find(self, segments: Sequence[str]) -> Path | None:
        """Return the file this tree serves for the URL path segments, if any."""
        if any(_is_hidden_or_unsafe(segment) for segment in segments):
            return None

        relative = os.path.join(*segments) if segments else ""
        try:
            full_path, stat_result = self._files.lookup_path(relative)
            if stat_result is not None and stat.S_ISDIR(stat_result.st_mode):
                full_path, stat_result = self._files.lookup_path(
                    os.path.join(relative, INDEX_FILE)
                )
        except OSError as exc:
            # ENAMETOOLONG, EACCES and friends are misses, not server errors
            logger.debug(
                "static.lookup_failed",
                extra={"directory": str(self.directory), "error": exc.strerror or str(exc)},
            )
            return None

        if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
            return None
        return Path(full_path)
