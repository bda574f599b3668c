from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from scriptcov.cli.exit_codes import EXIT_CONFIG, EXIT_OK, EXIT_THRESHOLD
from scriptcov.cli.util import DEFAULT_PYPROJECT, load_config_or_exit, load_coverage_or_exit, parse_scope
from scriptcov.core.thresholds import ThresholdConfig, Validator
from scriptcov.errors import InvalidThresholdError


def _scope_option(value: str | None) -> float | dict[str, float] | None:
    if value is None:
        return None
    try:
        return parse_scope(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def check_cmd(
    coverage: Annotated[
        list[Path],
        typer.Argument(help="Istanbul coverage JSON file(s); several files are merged."),
    ],
    global_: Annotated[
        str | None,
        typer.Option(
            "--global",
            "-g",
            help="Aggregate threshold: a number for every metric or 'statements=80,lines=70'.",
        ),
    ] = None,
    each: Annotated[
        str | None,
        typer.Option("--each", "-e", help="Per-file threshold, same syntax as --global."),
    ] = None,
    config: Annotated[
        Path,
        typer.Option("--config", help="pyproject.toml holding [tool.scriptcov.thresholds]."),
    ] = DEFAULT_PYPROJECT,
) -> None:
    """Fail if the coverage map does not meet the configured thresholds."""
    settings = load_config_or_exit(config)
    raw: dict[str, Any] = dict(settings.thresholds)
    global_scope = _scope_option(global_)
    each_scope = _scope_option(each)
    if global_scope is not None:
        raw["global"] = global_scope
    if each_scope is not None:
        raw["each"] = each_scope

    try:
        thresholds = ThresholdConfig.from_dict(raw)
    except InvalidThresholdError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc

    coverage_map = load_coverage_or_exit(coverage)
    result = Validator(thresholds).evaluate(coverage_map)
    for message in result.messages:
        typer.echo(message, err=True)
    if not result.passed:
        raise typer.Exit(code=EXIT_THRESHOLD)
    typer.echo(f"All coverage thresholds met ({len(coverage_map)} files).")
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
