"""Global options shared by all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from ..version import VersionInfo
from . import app
from ._common import console


def _print_version(value: bool) -> None:
    if value:
        console.print(str(VersionInfo.detect()), markup=False, highlight=False)
        raise typer.Exit(0)


@app.callback()
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every compared formula",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    """
    Compare the weight formulas of Substrate runtimes.

    [bold cyan]Examples:[/bold cyan]

      subweight compare commits v0.9.19 v0.9.20 --method guess-worst

      subweight compare files --old old/balances.rs --new new/balances.rs --method base

      subweight parse files runtime/polkadot/src/weights
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config
    ctx.obj["log_file"] = str(log_file) if log_file is not None else None
    ctx.obj["version"] = VersionInfo.detect()
