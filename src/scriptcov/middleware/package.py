"""Resolving the name under which the package under test is served."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from scriptcov import logger

if TYPE_CHECKING:
    from scriptcov.config import CoverageOptions


def read_json(filename: str, directory: Path | None = None) -> Any | None:
    """Read a JSON file, returning ``None`` if it is missing or malformed."""
    path = (directory or Path()).resolve() / filename
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Could not parse %s as JSON: %s", path, e)
    return None


def get_package_name(options: CoverageOptions) -> str:
    """Explicit ``package_name``, else the manifest's ``name``, else the root directory name."""
    if options.package_name:
        return options.package_name
    manifest_name = "package.json" if options.npm else "bower.json"
    manifest = read_json(manifest_name, options.root)
    if isinstance(manifest, dict) and isinstance(manifest.get("name"), str):
        return manifest["name"]
    basename = Path(options.root).resolve().name
    logger.warning("no %s found, defaulting to packageName=%s", manifest_name, basename)
    return basename


__all__ = ["get_package_name", "read_json"]
