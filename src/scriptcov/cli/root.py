from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from scriptcov import __version__
from scriptcov.cli import check, summary
from scriptcov.cli.util import configure_runtime


def create_app() -> typer.Typer:
    app = typer.Typer(help="Coverage thresholds for instrumented browser test runs.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"scriptcov {__version__}")
            raise typer.Exit
        configure_runtime(quiet=quiet, verbose=verbose)
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit

    check.register(app)
    summary.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
