"""The coverage middleware: serve instrumented assets for matching requests."""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias
from urllib.parse import urlsplit

from scriptcov.middleware.cache import InstrumentationCache
from scriptcov.middleware.capabilities import browser_capabilities
from scriptcov.middleware.events import EventEmitter, LoggingEmitter
from scriptcov.middleware.instrument import EngineFactory, ScriptInstrumenter
from scriptcov.middleware.package import get_package_name
from scriptcov.middleware.path_filter import MatchRules, build_rules
from scriptcov.middleware.transform import CompatibilityTransform, ScriptTransformer

if TYPE_CHECKING:
    from scriptcov.config import CoverageOptions
    from scriptcov.core.types import CapabilityProfile

SCRIPT_RE = re.compile(r"\.(?:j|e|mj)s$")
HTML_RE = re.compile(r"\.html?$")

JS_CONTENT_TYPE = "application/javascript"
HTML_CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Framework-neutral view of an inbound request."""

    path: str
    user_agent: str = ""
    base_url: str = ""

    @classmethod
    def from_url(cls, url: str, *, user_agent: str = "", base_url: str = "") -> RequestDescriptor:
        """Build a descriptor from a raw URL, dropping any query string or fragment."""
        return cls(path=urlsplit(url).path, user_agent=user_agent, base_url=base_url)


@dataclass(frozen=True, slots=True)
class Response:
    body: str
    content_type: str = JS_CONTENT_TYPE
    status: int = 200


NextHandler: TypeAlias = Callable[[RequestDescriptor], Response]


class CoverageMiddleware:
    """Intercept asset requests and answer matching ones with instrumented code.

    Construct once per test server; call :meth:`clear_cache` between runs.
    Requests that do not match the rule set, or match but are neither scripts
    nor pages, are handed to ``call_next`` untouched.
    """

    def __init__(
        self,
        options: CoverageOptions,
        *,
        engine_factory: EngineFactory,
        transformer: ScriptTransformer,
        root: Path | str | None = None,
        emitter: EventEmitter | None = None,
        cache: InstrumentationCache | None = None,
        capabilities: Callable[[str | None], CapabilityProfile] = browser_capabilities,
    ) -> None:
        self.options = options
        self.root = Path(root) if root is not None else Path(options.root)
        self.emitter = emitter or LoggingEmitter()
        self.cache = cache if cache is not None else InstrumentationCache()
        self.package_name = get_package_name(options)
        self.rules: MatchRules = build_rules(options, self.package_name)
        self.instrumenter = ScriptInstrumenter(engine_factory, self.cache, plugins=options.babel_plugins)
        self.transform = CompatibilityTransform(
            transformer,
            package_name=self.package_name,
            root=Path(options.root),
            client_root=options.client_root,
            npm=options.npm,
            module_resolution=options.module_resolution,
            is_component_request_override=options.is_component_request_override,
            compile_mode=options.compile,
            capabilities=capabilities,
        )
        self._prefix_re = re.compile(rf"^/[^/]+/{re.escape(self.package_name)}")

    def resolve_path(self, url_path: str) -> Path:
        """Map ``/<mount>/<package>/rest`` onto ``<root>/rest``."""
        return Path(self._prefix_re.sub(lambda _: str(self.root), url_path, count=1))

    def is_within_root(self, path: Path) -> bool:
        """Whether *path* stays under the served root once ``..`` segments are collapsed."""
        return Path(os.path.normpath(path)).is_relative_to(os.path.normpath(self.root))

    def clear_cache(self) -> None:
        self.cache.clear()

    def __call__(
        self,
        request: RequestDescriptor,
        call_next: NextHandler,
    ) -> Response:
        url = request.path
        if not self.rules.matches(url):
            self.emitter.emit("debug", "coverage", "skip", url)
            return call_next(request)

        absolute_path = self.resolve_path(url)
        if not self.is_within_root(absolute_path):
            self.emitter.emit("warning", "coverage", "refuse outside root", url)
            return Response(body="", content_type="text/plain", status=404)

        if SCRIPT_RE.search(absolute_path.name):
            self.emitter.emit("debug", "coverage", "instrument", url)
            code = self.instrumenter.instrument(absolute_path, key=url)
            if not code:
                return Response(body="", content_type=JS_CONTENT_TYPE)
            return Response(body=self.transform(request, code, absolute_path), content_type=JS_CONTENT_TYPE)

        if HTML_RE.search(absolute_path.name):
            self.emitter.emit("debug", "coverage", "instrument", url)
            return Response(
                body=self.instrumenter.instrument(absolute_path, html=True, key=url),
                content_type=HTML_CONTENT_TYPE,
            )

        self.emitter.emit("debug", "coverage", "skip whitelisted", url)
        return call_next(request)


__all__ = [
    "HTML_CONTENT_TYPE",
    "JS_CONTENT_TYPE",
    "CoverageMiddleware",
    "NextHandler",
    "RequestDescriptor",
    "Response",
]
