from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from scriptcov.cli.exit_codes import EXIT_OK
from scriptcov.cli.util import load_coverage_or_exit
from scriptcov.core.thresholds import format_pct
from scriptcov.core.types import Metric

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scriptcov.core.coverage import CoverageSummary


def _row(label: str, summary: CoverageSummary) -> list[str]:
    return [label, *(f"{format_pct(summary[m].pct)}%" for m in Metric)]


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Plain left/right aligned table: first column left, the rest right."""
    widths = [max(len(str(r[col])) for r in [headers, *rows]) for col in range(len(headers))]

    def fmt(cells: Sequence[str]) -> str:
        first, *rest = cells
        parts = [str(first).ljust(widths[0])]
        parts.extend(str(c).rjust(w) for c, w in zip(rest, widths[1:], strict=True))
        return " | ".join(parts).rstrip()

    rule = "-+-".join("-" * w for w in widths)
    return "\n".join([fmt(headers), rule, *(fmt(r) for r in rows)])


def summary_cmd(
    coverage: Annotated[
        list[Path],
        typer.Argument(help="Istanbul coverage JSON file(s); several files are merged."),
    ],
) -> None:
    """Print per-file and total percentages for all four metrics."""
    coverage_map = load_coverage_or_exit(coverage)
    rows = [_row(fc.path, fc.summary()) for fc in coverage_map]
    rows.append(_row("All files", coverage_map.summary()))
    headers = ["File", *(m.value.capitalize() for m in Metric)]
    typer.echo(format_table(headers, rows))
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("summary")(summary_cmd)


__all__ = ["format_table", "register"]
