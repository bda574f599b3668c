"""Include/exclude rules deciding which request paths get instrumented.

Patterns use git-wildmatch semantics (via :mod:`pathspec`):

* ``**`` crosses path separators, ``*`` and ``?`` do not;
* a pattern matching a directory also matches everything below it;
* a pattern without a slash matches the basename at any depth;
* a leading ``/`` anchors the pattern at the root of the request path.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pathspec import PathSpec

from scriptcov import logger
from scriptcov.errors import InvalidPatternError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scriptcov.config import CoverageOptions

NODE_MODULES_PATTERN = "**/node_modules/**"


def qualify(pattern: str, base_path: str) -> str:
    """Prefix *pattern* with the package mount path, e.g. ``/components/pkg/**/test/**``."""
    return base_path.rstrip("/") + "/" + pattern.lstrip("/")


def _compile(patterns: Sequence[str]) -> PathSpec:
    try:
        return PathSpec.from_lines("gitwildmatch", patterns)
    except (ValueError, TypeError) as exc:
        msg = f"invalid glob pattern in {list(patterns)!r}: {exc}"
        raise InvalidPatternError(msg) from exc


@dataclass(frozen=True, slots=True)
class MatchRules:
    """Compiled include/exclude rule set; read-only once built."""

    include: tuple[str, ...]
    exclude: tuple[str, ...]
    relative: bool
    _include_spec: PathSpec = field(repr=False, compare=False)
    _exclude_spec: PathSpec = field(repr=False, compare=False)

    @classmethod
    def build(
        cls,
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
        *,
        base_path: str | None = None,
    ) -> MatchRules:
        """Compile the rules; patterns are qualified with *base_path* unless it is ``None``."""
        inc = tuple(include)
        exc = tuple(exclude)
        if base_path is not None:
            inc = tuple(qualify(p, base_path) for p in inc)
            exc = tuple(qualify(p, base_path) for p in exc)
        return cls(
            include=inc,
            exclude=exc,
            relative=base_path is None,
            _include_spec=_compile(inc),
            _exclude_spec=_compile(exc),
        )

    def matches(self, path: str) -> bool:
        inc = not self.include or self._include_spec.match_file(path)
        exc = bool(self.exclude) and self._exclude_spec.match_file(path)
        logger.debug("path filter %s include=%s exclude=%s", path, inc, exc)
        return bool(inc and not exc)


def matches(path: str, rules: MatchRules) -> bool:
    """Return ``True`` if *path* satisfies an include rule and no exclude rule."""
    return rules.matches(path)


def build_rules(options: CoverageOptions, package_name: str) -> MatchRules:
    """Build the rule set for a middleware instance from its options.

    The npm layout always excludes ``node_modules`` trees; dependencies are
    never served as coverage targets.
    """
    exclude = list(options.exclude_patterns)
    if options.npm and NODE_MODULES_PATTERN not in exclude:
        exclude.append(NODE_MODULES_PATTERN)
    base_path = None if options.ignore_base_path else posixpath.join(options.client_root, package_name)
    return MatchRules.build(options.include, exclude, base_path=base_path)


__all__ = ["NODE_MODULES_PATTERN", "MatchRules", "build_rules", "matches", "qualify"]
