"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import typer

from scriptcov import logger
from scriptcov.cli.exit_codes import EXIT_CONFIG, EXIT_DATAERR, EXIT_NOINPUT
from scriptcov.config import LOG_FORMAT, Config, load_config
from scriptcov.core.coverage import CoverageMap
from scriptcov.core.parse import load_coverage
from scriptcov.core.types import Metric
from scriptcov.errors import ConfigError, CoverageJSONNotFoundError, InvalidCoverageJSONError

_TOKEN_RE = re.compile(r"^[a-zA-Z_-]+=")
_METRIC_ALIASES = {
    "stmt": Metric.STATEMENTS,
    "statement": Metric.STATEMENTS,
    "statements": Metric.STATEMENTS,
    "br": Metric.BRANCHES,
    "branch": Metric.BRANCHES,
    "branches": Metric.BRANCHES,
    "fn": Metric.FUNCTIONS,
    "function": Metric.FUNCTIONS,
    "functions": Metric.FUNCTIONS,
    "line": Metric.LINES,
    "lines": Metric.LINES,
}


def configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def parse_scope(expression: str) -> float | dict[str, float]:
    """Parse ``--global``/``--each`` values: ``80`` or ``statements=80,lines=-10``."""
    text = expression.strip()
    if not text:
        msg = "threshold expression must be non-empty"
        raise ValueError(msg)
    if "=" not in text:
        try:
            return float(text.rstrip("%"))
        except ValueError as exc:
            msg = f"invalid threshold value: {text!r}"
            raise ValueError(msg) from exc

    scope: dict[str, float] = {}
    for token in (t.strip() for t in re.split(r"[,\s]+", text) if t.strip()):
        if not _TOKEN_RE.match(token):
            msg = f"invalid threshold token: {token!r}"
            raise ValueError(msg)
        key, raw_value = token.split("=", 1)
        metric = _METRIC_ALIASES.get(key.strip().lower())
        if metric is None:
            msg = f"unknown threshold metric: {key!r}"
            raise ValueError(msg)
        if metric.value in scope:
            msg = f"duplicate threshold for {metric.value}"
            raise ValueError(msg)
        try:
            scope[metric.value] = float(raw_value.strip().rstrip("%"))
        except ValueError as exc:
            msg = f"invalid threshold value in {token!r}"
            raise ValueError(msg) from exc
    return scope


def load_config_or_exit(path: Path) -> Config:
    try:
        return load_config(path)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc


def load_coverage_or_exit(paths: list[Path]) -> CoverageMap:
    try:
        return load_coverage(paths)
    except CoverageJSONNotFoundError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except InvalidCoverageJSONError as exc:
        typer.echo(f"ERROR: failed to parse coverage JSON: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc
    except OSError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc


DEFAULT_PYPROJECT = Path("pyproject.toml")

__all__ = [
    "DEFAULT_PYPROJECT",
    "configure_runtime",
    "load_config_or_exit",
    "load_coverage_or_exit",
    "parse_scope",
]
