"""Override asset registry.

Expands operator-supplied glob patterns (or literal paths) into the rules the
resolver consults before the bundled defaults. Runs once at startup; the
resulting rules are never mutated afterwards.
"""

from __future__ import annotations

import glob
import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from asset_server.core.errors import ConfigurationAppError

logger = logging.getLogger(__name__)


class AssetKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class AssetRule:
    """A public asset name backed by a file or a directory tree.

    Attributes:
        public_name: First URL path segment the rule answers to.
        source_path: Filesystem location backing the rule.
        kind: Whether the rule serves one file or mounts a directory.
    """

    public_name: str
    source_path: str
    kind: AssetKind

    @property
    def is_file(self) -> bool:
        return self.kind is AssetKind.FILE


def _inspect(path: str, pattern: str) -> AssetKind:
    """Stat a glob match and classify it.

    Raises:
        ConfigurationAppError: If the match cannot be inspected.
    """
    try:
        st = os.stat(path)
    except OSError as exc:
        raise ConfigurationAppError(
            code="override_unreadable",
            message=f"Cannot inspect override asset {path!r}: {exc.strerror or exc}",
            details={"path": path, "pattern": pattern},
        ) from exc

    if stat.S_ISDIR(st.st_mode):
        return AssetKind.DIRECTORY
    return AssetKind.FILE


def expand_pattern(pattern: str) -> list[str]:
    """Expand one glob pattern into its sorted matches.

    A literal path that exists matches itself; ``**`` recurses.
    """
    return sorted(glob.glob(os.path.expanduser(pattern), recursive=True))


def register(patterns: Iterable[str]) -> list[AssetRule]:
    """Build override rules from glob patterns, in registration order.

    Each match becomes exactly one rule named after its base name. Patterns
    matching nothing contribute no rules and are not an error.

    Args:
        patterns: Shell-glob patterns or literal paths.

    Returns:
        list[AssetRule]: Rules in pattern order, matches sorted per pattern.

    Raises:
        ConfigurationAppError: If a match cannot be inspected (fail fast).
    """
    rules: list[AssetRule] = []

    for pattern in patterns:
        matches = expand_pattern(pattern)
        if not matches:
            logger.warning("registry.pattern_unmatched", extra={"pattern": pattern})
            continue

        for path in matches:
            kind = _inspect(path, pattern)
            rule = AssetRule(
                public_name=os.path.basename(os.path.normpath(path)),
                source_path=os.path.abspath(path),
                kind=kind,
            )
            rules.append(rule)
            logger.info(
                "registry.rule_registered",
                extra={
                    "public_name": rule.public_name,
                    "source_path": rule.source_path,
                    "kind": rule.kind.value,
                },
            )

    return rules
