"""Central configuration and constants for ``scriptcov``."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

from scriptcov import logger
from scriptcov.core.types import CompileMode, ModuleResolution
from scriptcov.errors import ConfigError

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_EXCLUDE: tuple[str, ...] = ("**/test/**",)
DEFAULT_CLIENT_ROOT = "/components/"

_SCHEMA_FILES: dict[str, str] = {
    "thresholds": "thresholds.schema.json",
    "coverage": "coverage.schema.json",
}


@cache
def get_schema(name: str) -> dict[str, object]:
    """Load and cache one of the bundled JSON schemas."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("scriptcov.data").joinpath(filename).read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class CoverageOptions:
    """Settings consumed by :class:`~scriptcov.middleware.CoverageMiddleware`.

    Fields
    ------
    root:
        Filesystem root that request paths resolve against.
    package_name:
        Explicit package name; when unset it is read from the manifest.
    npm:
        Use the npm layout (``package.json``/``node_modules``) instead of bower.
    include / exclude:
        Glob patterns selecting which request paths get instrumented.
        ``exclude=None`` means the default ``**/test/**``.
    ignore_base_path:
        Match patterns against raw request paths instead of prefixing them with
        the package mount path.
    module_resolution:
        Override for the compatibility transform's import resolution.
    is_component_request_override:
        Force the "package under test" classification for every request.
    babel_plugins:
        Extra parser plugins merged into the instrumenter's defaults.
    client_root:
        Mount point under which the test server exposes packages.
    compile:
        Syntax downgrade policy.
    """

    root: Path = field(default_factory=Path.cwd)
    package_name: str | None = None
    npm: bool = False
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] | None = None
    ignore_base_path: bool = False
    module_resolution: ModuleResolution | None = None
    is_component_request_override: bool | None = None
    babel_plugins: tuple[str, ...] = ()
    client_root: str = DEFAULT_CLIENT_ROOT
    compile: CompileMode = CompileMode.AUTO

    @property
    def exclude_patterns(self) -> tuple[str, ...]:
        return DEFAULT_EXCLUDE if self.exclude is None else self.exclude


@dataclass(frozen=True, slots=True)
class Config:
    """Everything read from ``[tool.scriptcov]``."""

    options: CoverageOptions
    thresholds: dict[str, Any] = field(default_factory=dict)


_OPTION_KEYS = {
    "root": "root",
    "package-name": "package_name",
    "package_name": "package_name",
    "npm": "npm",
    "include": "include",
    "exclude": "exclude",
    "ignore-base-path": "ignore_base_path",
    "ignore_base_path": "ignore_base_path",
    "module-resolution": "module_resolution",
    "module_resolution": "module_resolution",
    "babel-plugins": "babel_plugins",
    "babel_plugins": "babel_plugins",
    "client-root": "client_root",
    "client_root": "client_root",
    "compile": "compile",
}


def _coerce_option(key: str, value: object, *, base: Path) -> object:
    if key == "root":
        p = Path(str(value))
        return p if p.is_absolute() else (base / p)
    if key in {"include", "exclude", "babel_plugins"}:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            msg = f"{key} must be a list of strings"
            raise ConfigError(msg)
        return tuple(value)
    if key in {"npm", "ignore_base_path"}:
        if not isinstance(value, bool):
            msg = f"{key} must be a boolean"
            raise ConfigError(msg)
        return value
    try:
        if key == "module_resolution":
            return ModuleResolution(value)
        if key == "compile":
            return CompileMode(value)
    except ValueError as exc:
        msg = f"invalid value for {key}: {value!r}"
        raise ConfigError(msg) from exc
    return str(value)


def parse_config(data: dict[str, Any], *, base: Path) -> Config:
    """Build a :class:`Config` from an already-parsed ``[tool.scriptcov]`` table."""
    kwargs: dict[str, object] = {"root": base}
    thresholds: dict[str, Any] = {}
    for raw_key, value in data.items():
        if raw_key == "thresholds":
            if not isinstance(value, dict):
                msg = "[tool.scriptcov.thresholds] must be a table"
                raise ConfigError(msg)
            thresholds = dict(value)
            continue
        key = _OPTION_KEYS.get(raw_key)
        if key is None:
            logger.warning("ignoring unknown scriptcov option %r", raw_key)
            continue
        kwargs[key] = _coerce_option(key, value, base=base)
    return Config(options=CoverageOptions(**kwargs), thresholds=thresholds)  # type: ignore[arg-type]


def load_config(pyproject: Path) -> Config:
    """Read ``[tool.scriptcov]`` from *pyproject*; a missing file yields the defaults."""
    base = pyproject.parent.resolve()
    if not pyproject.exists():
        return Config(options=CoverageOptions(root=base))
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"Failed to parse {pyproject}: {e}"
        raise ConfigError(msg) from e

    section = data.get("tool", {}).get("scriptcov", {})
    if not isinstance(section, dict):
        msg = "[tool.scriptcov] must be a table"
        raise ConfigError(msg)
    return parse_config(section, base=base)


__all__ = [
    "DEFAULT_CLIENT_ROOT",
    "DEFAULT_EXCLUDE",
    "LOG_FORMAT",
    "Config",
    "CoverageOptions",
    "get_schema",
    "load_config",
    "parse_config",
]
