"""Finding inline scripts in HTML pages and rewriting them in place."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# quoted attribute values may contain ">"
_SCRIPT_RE = re.compile(
    r"""(<script\b)((?:"[^"]*"|'[^']*'|[^'">])*)(>)(.*?)(</script\s*>)""", re.IGNORECASE | re.DOTALL
)
_ATTR_RE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+)))?""")

JS_TYPES = frozenset(
    {
        "",
        "text/javascript",
        "application/javascript",
        "application/ecmascript",
        "text/ecmascript",
        "module",
    }
)


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse the attribute text of a start tag into a lower-cased name -> value dict."""
    attrs: dict[str, str] = {}
    for m in _ATTR_RE.finditer(raw):
        name = m.group(1).lower()
        value = next((g for g in m.group(2, 3, 4) if g is not None), "")
        attrs.setdefault(name, value)
    return attrs


def is_inline_javascript(raw_attrs: str) -> bool:
    """External scripts and non-JavaScript blocks (templates, JSON) are left alone."""
    attrs = parse_attributes(raw_attrs)
    if "src" in attrs:
        return False
    return attrs.get("type", "").strip().lower() in JS_TYPES


def find_scripts(document: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of every inline JavaScript body in *document*."""
    return [m.span(4) for m in _SCRIPT_RE.finditer(document) if is_inline_javascript(m.group(2))]


def hook_scripts(document: str, callback: Callable[[str], str]) -> str:
    """Run every inline JavaScript body through *callback* and splice the results back.

    Everything outside the script bodies, including the ``<script>`` tags
    themselves, is preserved byte for byte.
    """
    parts: list[str] = []
    pos = 0
    for start, end in find_scripts(document):
        parts.append(document[pos:start])
        parts.append(callback(document[start:end]))
        pos = end
    parts.append(document[pos:])
    return "".join(parts)


__all__ = ["JS_TYPES", "find_scripts", "hook_scripts", "is_inline_javascript", "parse_attributes"]
