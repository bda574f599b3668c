from scriptcov.middleware.app import (
    HTML_CONTENT_TYPE,
    JS_CONTENT_TYPE,
    CoverageMiddleware,
    NextHandler,
    RequestDescriptor,
    Response,
)
from scriptcov.middleware.cache import InstrumentationCache
from scriptcov.middleware.capabilities import browser_capabilities, get_compile_target
from scriptcov.middleware.events import EventEmitter, LoggingEmitter
from scriptcov.middleware.html import hook_scripts
from scriptcov.middleware.instrument import (
    DEFAULT_PLUGINS,
    EngineFactory,
    InstrumentationEngine,
    InstrumenterSettings,
    ScriptInstrumenter,
    get_source_map,
)
from scriptcov.middleware.namespace import replace_coverage
from scriptcov.middleware.package import get_package_name
from scriptcov.middleware.path_filter import MatchRules, build_rules, matches
from scriptcov.middleware.transform import CompatibilityTransform, ScriptTransformer, TransformOptions

__all__ = [
    "DEFAULT_PLUGINS",
    "HTML_CONTENT_TYPE",
    "JS_CONTENT_TYPE",
    "CompatibilityTransform",
    "CoverageMiddleware",
    "EngineFactory",
    "EventEmitter",
    "InstrumentationCache",
    "InstrumentationEngine",
    "InstrumenterSettings",
    "LoggingEmitter",
    "MatchRules",
    "NextHandler",
    "RequestDescriptor",
    "Response",
    "ScriptInstrumenter",
    "ScriptTransformer",
    "TransformOptions",
    "browser_capabilities",
    "build_rules",
    "get_compile_target",
    "get_package_name",
    "get_source_map",
    "hook_scripts",
    "matches",
    "replace_coverage",
]
