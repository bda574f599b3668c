"""Redirect instrumentation counters into the harness-wide coverage object."""

from __future__ import annotations

SHARED_COVERAGE_VARIABLE = "WCT.share.__coverage__"

ENGINE_COVERAGE_INIT = "coverage = global[gcv] || (global[gcv] = {});"
SHARED_COVERAGE_INIT = (
    "coverage = global.WCT.share.__coverage__ || "
    "(global.WCT = { share: { __coverage__: {} } }).share.__coverage__;"
)


def replace_coverage(code: str) -> str:
    """Swap the engine's per-module counter lookup for the shared ``WCT.share`` one.

    Pages carry one initialiser per inline script, so every occurrence is
    replaced.  Code without the engine's initialiser is returned unchanged.
    """
    return code.replace(ENGINE_COVERAGE_INIT, SHARED_COVERAGE_INIT)


__all__ = [
    "ENGINE_COVERAGE_INIT",
    "SHARED_COVERAGE_INIT",
    "SHARED_COVERAGE_VARIABLE",
    "replace_coverage",
]
