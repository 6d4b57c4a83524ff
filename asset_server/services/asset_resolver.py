"""Asset resolution: which file answers a request path.

Generated routes (shell, bundle, stylesheets) are handled by explicit routes
ahead of this resolver. Everything else goes through ``AssetResolver.resolve``,
which applies the remaining precedence tiers, first match wins:

1. override rules, in registration order
2. the default static root
3. the SPA shell fallback
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from asset_server.services.override_registry import AssetKind, AssetRule
from asset_server.utils.static_paths import StaticTree

logger = logging.getLogger(__name__)


class ResolutionKind(str, Enum):
    OVERRIDE_FILE = "override_file"
    OVERRIDE_DIRECTORY = "override_directory"
    STATIC = "static"
    SHELL = "shell"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one request path.

    Attributes:
        kind: Precedence tier that answered.
        file_path: File to send (None for the SPA shell).
        rule: Override rule that matched, if any.
    """

    kind: ResolutionKind
    file_path: Path | None = None
    rule: AssetRule | None = None

    @property
    def rate_limited(self) -> bool:
        return self.kind is ResolutionKind.OVERRIDE_FILE


SHELL_RESOLUTION = Resolution(kind=ResolutionKind.SHELL)


def split_path(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


class AssetResolver:
    """Resolve request paths against override rules and the static root."""

    def __init__(self, rules: Sequence[AssetRule], static_root: Path) -> None:
        self._rules = tuple(rules)
        self._static_tree = StaticTree(static_root)
        self._rule_trees = {
            rule: StaticTree(rule.source_path)
            for rule in self._rules
            if rule.kind is AssetKind.DIRECTORY
        }

    @property
    def rules(self) -> tuple[AssetRule, ...]:
        return self._rules

    def _match_rule(self, rule: AssetRule, rest: list[str]) -> Resolution | None:
        if rule.kind is AssetKind.FILE:
            # File overrides answer only the exact /<name> path
            if rest:
                return None
            return Resolution(
                kind=ResolutionKind.OVERRIDE_FILE,
                file_path=Path(rule.source_path),
                rule=rule,
            )

        target = self._rule_trees[rule].find(rest)
        if target is None:
            return None
        return Resolution(kind=ResolutionKind.OVERRIDE_DIRECTORY, file_path=target, rule=rule)

    def resolve(self, path: str) -> Resolution:
        """Resolve a decoded URL path to the asset that answers it.

        Args:
            path: Request path, e.g. ``/logo.png`` or ``/fonts/a.woff2``.

        Returns:
            Resolution: Never None; unmatched paths yield the SPA shell.
        """
        segments = split_path(path)

        if segments:
            head, rest = segments[0], segments[1:]
            for rule in self._rules:
                if rule.public_name != head:
                    continue
                resolution = self._match_rule(rule, rest)
                if resolution is not None:
                    return resolution

        target = self._static_tree.find(segments)
        if target is not None:
            return Resolution(kind=ResolutionKind.STATIC, file_path=target)

        logger.debug("resolver.shell_fallback", extra={"request_path": path})
        return SHELL_RESOLUTION
