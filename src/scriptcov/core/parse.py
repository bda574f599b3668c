"""Loading coverage maps from Istanbul JSON files."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from jsonschema import Draft202012Validator

from scriptcov import logger
from scriptcov.config import get_schema
from scriptcov.core.coverage import CoverageMap
from scriptcov.errors import CoverageJSONNotFoundError, InvalidCoverageJSONError

if TYPE_CHECKING:
    from pathlib import Path


def parse_coverage(data: Any, *, source: str = "<memory>") -> CoverageMap:
    """Validate *data* against the coverage schema and build a :class:`CoverageMap`."""
    validator = Draft202012Validator(get_schema("coverage"))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        where = "/".join(str(p) for p in first.absolute_path) or "<root>"
        msg = f"{source}: invalid coverage map at {where}: {first.message}"
        raise InvalidCoverageJSONError(msg)
    return CoverageMap(data)


def load_coverage(paths: Path | list[Path] | tuple[Path, ...]) -> CoverageMap:
    """Read one or more coverage JSON files and merge them into a single map."""
    if not isinstance(paths, (list, tuple)):
        paths = [paths]
    merged = CoverageMap()
    for path in paths:
        if not path.exists():
            msg = f"coverage file not found: {path}"
            raise CoverageJSONNotFoundError(msg)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            msg = f"{path}: not valid JSON: {exc}"
            raise InvalidCoverageJSONError(msg) from exc
        logger.debug("loaded coverage map %s", path)
        for fc in parse_coverage(data, source=str(path)):
            merged.add_file_coverage(fc)
    return merged


__all__ = ["load_coverage", "parse_coverage"]
