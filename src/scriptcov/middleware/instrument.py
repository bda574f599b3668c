"""Turning source files into instrumented script or page bodies.

The instrumentation engine itself is external; anything implementing
:class:`InstrumentationEngine` can be plugged in through an
:data:`EngineFactory`, which receives the :class:`InstrumenterSettings` the
middleware wants.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from scriptcov import logger
from scriptcov.middleware.html import hook_scripts
from scriptcov.middleware.namespace import SHARED_COVERAGE_INIT, SHARED_COVERAGE_VARIABLE, replace_coverage

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from scriptcov.middleware.cache import InstrumentationCache

DEFAULT_PLUGINS: tuple[str, ...] = (
    "importMeta",
    "asyncGenerators",
    "dynamicImport",
    "objectRestSpread",
    "optionalCatchBinding",
    "flow",
    "jsx",
)

_SOURCE_MAP_RE = re.compile(r"//# sourceMappingURL=(\S+\.js\.map)$")


@dataclass(frozen=True, slots=True)
class InstrumenterSettings:
    """Options handed to the engine factory."""

    coverage_variable: str = SHARED_COVERAGE_VARIABLE
    # Engines that can emit their own counter initialiser use this verbatim.
    coverage_initializer: str = SHARED_COVERAGE_INIT
    auto_wrap: bool = True
    embed_source: bool = True
    compact: bool = False
    preserve_comments: bool = False
    produce_source_map: bool = False
    es_modules: bool = True
    plugins: tuple[str, ...] = DEFAULT_PLUGINS


class InstrumentationEngine(Protocol):
    def instrument(self, code: str, filename: str, input_source_map: dict[str, Any] | None = None) -> str:
        """Return *code* with counter-increment statements inserted."""
        ...


EngineFactory: TypeAlias = Callable[[InstrumenterSettings], InstrumentationEngine]


def merge_plugins(extra: Sequence[str] | None) -> tuple[str, ...]:
    """Default parser plugins followed by *extra*, de-duplicated in order."""
    return tuple(dict.fromkeys((*DEFAULT_PLUGINS, *(extra or ()))))


def get_source_map(code: str, path: Path | None) -> dict[str, Any] | None:
    """Load the map named by a trailing ``//# sourceMappingURL=`` comment, if any.

    A missing or unparsable map is ignored.
    """
    if path is None:
        return None
    match = _SOURCE_MAP_RE.search(code)
    if match is None:
        return None
    map_path = path.parent / match.group(1)
    if not map_path.is_file():
        logger.debug("source map %s not found", map_path)
        return None
    try:
        data = json.loads(map_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("ignoring unreadable source map %s: %s", map_path, exc)
        return None
    return data if isinstance(data, dict) else None


class ScriptInstrumenter:
    """Instrument scripts and pages, memoizing results by request path."""

    def __init__(
        self,
        engine_factory: EngineFactory,
        cache: InstrumentationCache,
        *,
        plugins: Sequence[str] | None = None,
    ) -> None:
        self.settings = InstrumenterSettings(plugins=merge_plugins(plugins))
        self.engine = engine_factory(self.settings)
        self.cache = cache

    def instrument_script(self, code: str, path: Path) -> str:
        return self.engine.instrument(code, str(path), get_source_map(code, path))

    def instrument_html(self, document: str, path: Path) -> str:
        # Inline scripts have no map of their own.
        return hook_scripts(document, lambda code: self.engine.instrument(code, str(path)))

    def instrument(self, path: Path, *, html: bool = False, key: str | None = None) -> str:
        """Return the instrumented, namespace-rewritten body for *path*.

        ``key`` is the request path used for memoization; it defaults to the
        file path.  A missing file yields an empty body and is not cached; bytes
        that are not valid UTF-8 are replaced with U+FFFD.
        """
        if not path.is_file():
            logger.debug("cannot instrument missing file %s", path)
            return ""
        cache_key = key if key is not None else str(path)

        def build() -> str:
            code = path.read_text(encoding="utf-8", errors="replace")
            body = self.instrument_html(code, path) if html else self.instrument_script(code, path)
            return replace_coverage(body)

        return self.cache.get_or_create(cache_key, build)


__all__ = [
    "DEFAULT_PLUGINS",
    "EngineFactory",
    "InstrumentationEngine",
    "InstrumenterSettings",
    "ScriptInstrumenter",
    "get_source_map",
    "merge_plugins",
]
