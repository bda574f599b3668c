"""Browser capability detection from user-agent strings."""

from __future__ import annotations

import re
from dataclasses import dataclass

from scriptcov.core.types import FALLBACK_JS_LEVEL, JS_LEVELS, CapabilityProfile, CompileMode

Version = tuple[int, ...]


@dataclass(frozen=True, slots=True)
class _Family:
    name: str
    pattern: re.Pattern[str]
    # capability -> minimum version
    since: dict[str, Version]


_CHROME_SINCE: dict[str, Version] = {
    "es2015": (49,),
    "es2016": (58,),
    "es2017": (58,),
    "es2018": (64,),
    "modules": (64,),
    "push": (41,),
}

# Order matters: Edge and Opera also advertise Chrome, and Chrome advertises Safari.
_FAMILIES: tuple[_Family, ...] = (
    _Family(
        "edge",
        re.compile(r"\bEdge/(\d+)(?:\.(\d+))?"),
        {"es2015": (15,), "es2016": (15,), "es2017": (15,), "push": (17,)},
    ),
    _Family("chrome", re.compile(r"\bEdg(?:A|iOS)?/(\d+)(?:\.(\d+))?"), _CHROME_SINCE),
    _Family(
        "opera",
        re.compile(r"\bOPR/(\d+)(?:\.(\d+))?"),
        {
            "es2015": (36,),
            "es2016": (45,),
            "es2017": (45,),
            "es2018": (51,),
            "modules": (51,),
            "push": (28,),
        },
    ),
    _Family("chrome", re.compile(r"\b(?:HeadlessChrome|Chrome|Chromium|CriOS)/(\d+)(?:\.(\d+))?"), _CHROME_SINCE),
    _Family(
        "firefox",
        re.compile(r"\b(?:Firefox|FxiOS)/(\d+)(?:\.(\d+))?"),
        {
            "es2015": (51,),
            "es2016": (52,),
            "es2017": (52,),
            "es2018": (58,),
            "modules": (60,),
            "push": (44,),
        },
    ),
    _Family(
        "mobile safari",
        re.compile(r"\bVersion/(\d+)(?:\.(\d+))?.*\bMobile/"),
        {
            "es2015": (10,),
            "es2016": (10, 3),
            "es2017": (10, 3),
            "es2018": (11, 3),
            "modules": (11, 3),
        },
    ),
    _Family(
        "safari",
        re.compile(r"\bVersion/(\d+)(?:\.(\d+))?.*\bSafari/"),
        {
            "es2015": (10,),
            "es2016": (10, 1),
            "es2017": (10, 1),
            "es2018": (11, 1),
            "modules": (11, 1),
            "push": (7,),
        },
    ),
)


def _version(match: re.Match[str]) -> Version:
    return tuple(int(g) for g in match.groups() if g is not None)


def browser_capabilities(user_agent: str | None) -> CapabilityProfile:
    """Return the capabilities a browser is known to support.

    Unknown or missing user agents get an empty profile, which compiles down
    to the most conservative target.
    """
    if not user_agent:
        return frozenset()
    for family in _FAMILIES:
        match = family.pattern.search(user_agent)
        if match is None:
            continue
        version = _version(match)
        return frozenset(cap for cap, minimum in family.since.items() if version >= minimum)
    return frozenset()


def get_compile_target(capabilities: CapabilityProfile, mode: CompileMode = CompileMode.AUTO) -> str | None:
    """Pick the syntax level to compile to; ``None`` means leave syntax alone."""
    if mode == CompileMode.NEVER:
        return None
    if mode == CompileMode.ALWAYS:
        return FALLBACK_JS_LEVEL
    return next((level for level in JS_LEVELS if level in capabilities), FALLBACK_JS_LEVEL)


__all__ = ["browser_capabilities", "get_compile_target"]
