"""Shared type aliases and enumerations used across scriptcov."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Common type aliases
# ---------------------------------------------------------------------------

CoveragePercent: TypeAlias = float
"""Percentage value in the inclusive range ``0`` to ``100``."""

CapabilityProfile: TypeAlias = frozenset[str]
"""Set of capability names a browser declares support for (``es2017``, ``modules``...)."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Metric(StrEnum):
    """Coverage metrics evaluated by the threshold validator."""

    STATEMENTS = "statements"
    BRANCHES = "branches"
    FUNCTIONS = "functions"
    LINES = "lines"


class CompileMode(StrEnum):
    """When to downgrade script syntax for the requesting browser."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class ModuleResolution(StrEnum):
    """How bare import specifiers are resolved by the compatibility transform."""

    NODE = "node"
    NONE = "none"


# Ordered from most to least capable.
JS_LEVELS: tuple[str, ...] = ("es2018", "es2017", "es2016", "es2015")
FALLBACK_JS_LEVEL = "es5"

FULL_COVERAGE: float = 100.0


__all__ = [
    "FALLBACK_JS_LEVEL",
    "FULL_COVERAGE",
    "JS_LEVELS",
    "CapabilityProfile",
    "CompileMode",
    "CoveragePercent",
    "Metric",
    "ModuleResolution",
]
