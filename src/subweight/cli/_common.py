"""Shared CLI helpers and options."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from ..config import Settings, load_settings
from ..exceptions import SubweightError
from ..logging_config import get_logger, setup_logging
from ..models import CompareMethod, RelativeChange

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)

METHOD_CHOICES = [m.value for m in CompareMethod]
UNIT_CHOICES = ["time", "proof", "weight"]
CHANGE_CHOICES = [c.value for c in RelativeChange]
FORMAT_CHOICES = ["rich", "json"]


def method_option():
    return typer.Option(
        None,
        "--method",
        "-m",
        help="How formulas are compared: base | guess-worst | exact-worst | asymptotic",
        click_type=click.Choice(METHOD_CHOICES, case_sensitive=False),
    )


def unit_option():
    return typer.Option(
        None,
        "--unit",
        "-u",
        help="Dimension to compare: time (default) or proof",
        click_type=click.Choice(UNIT_CHOICES, case_sensitive=False),
    )


def ignore_errors_option():
    return typer.Option(False, "--ignore-errors", help="Skip files that cannot be parsed")


def git_pull_option():
    return typer.Option(False, "--git-pull", help="Fetch the revisions before checking them out")


def offline_option():
    return typer.Option(False, "--offline", help="Never access the network")


def threshold_option():
    return typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimal relative change in percent (default: 5)",
        min=0.0,
    )


def change_option():
    return typer.Option(
        None,
        "--change",
        help="Only show these kinds of change (repeatable)",
        click_type=click.Choice(CHANGE_CHOICES, case_sensitive=False),
    )


def extrinsic_option():
    return typer.Option(None, "--extrinsic", help="Regex an extrinsic name must match")


def pallet_option():
    return typer.Option(None, "--pallet", "--file", help="Regex a file name must match")


def format_option():
    return typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format",
        click_type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    )


def resolve_settings(
    ctx: typer.Context,
    method: Optional[str] = None,
    unit: Optional[str] = None,
    ignore_errors: bool = False,
    git_pull: bool = False,
    offline: bool = False,
    threshold: Optional[float] = None,
    change: Optional[List[str]] = None,
    extrinsic: Optional[str] = None,
    pallet: Optional[str] = None,
    path_pattern: Optional[str] = None,
    max_files: Optional[int] = None,
) -> Settings:
    """Build settings from CLI options and set up logging accordingly.

    Flags left unset are passed as None so that they do not mask values from
    config files.
    """
    obj = ctx.ensure_object(dict)
    config: Optional[Path] = obj.get("config")
    settings = load_settings(
        config_file=config,
        method=method,
        unit=unit,
        ignore_errors=ignore_errors or None,
        git_pull=git_pull or None,
        offline=offline or None,
        threshold=threshold,
        change=change or None,
        extrinsic=extrinsic,
        pallet=pallet,
        path_pattern=path_pattern,
        max_files=max_files,
        log_file=obj.get("log_file"),
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
    )
    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
        log_file=settings.log_file,
    )
    version = obj.get("version")
    if version is not None:
        logger.debug("Running %s", version)
    return settings


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn errors into a message on stderr and a non-zero exit code."""
    try:
        yield
    except typer.Exit:
        raise
    except SubweightError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)
