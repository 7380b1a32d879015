"""Compare commands: two git revisions or two sets of weight files."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import compare_commits, compare_paths
from ..config import Settings
from ..diff import TotalDiff, filter_changes, sort_changes
from ..formatters import get_formatter
from ..logging_config import get_logger
from ..models import Dimension
from . import compare_app
from ._common import (
    change_option,
    extrinsic_option,
    format_option,
    git_pull_option,
    handle_errors,
    ignore_errors_option,
    method_option,
    offline_option,
    pallet_option,
    resolve_settings,
    threshold_option,
    unit_option,
)

logger = get_logger(__name__)


def _report(diff: TotalDiff, settings: Settings, output_format: str) -> None:
    filter_params = settings.filter_params()
    diff = sort_changes(filter_changes(diff, filter_params))
    logger.info("%d entries after filtering", len(diff))
    get_formatter(output_format.lower()).render(diff, Dimension.parse(settings.unit))


@compare_app.command(name="commits")
def compare_commits_cmd(
    ctx: typer.Context,
    old: str = typer.Argument(..., help="Old revision: branch, tag or commit"),
    new: str = typer.Argument("master", help="New revision: branch, tag or commit"),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Git repository to check out the revisions in",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    path_pattern: Optional[str] = typer.Option(
        None,
        "--path-pattern",
        "-p",
        help="Comma separated globs of weight files below the repository root",
    ),
    max_files: Optional[int] = typer.Option(
        None,
        "--max-files",
        help="Abort if the path pattern selects more files than this",
        min=1,
    ),
    method: Optional[str] = method_option(),
    unit: Optional[str] = unit_option(),
    ignore_errors: bool = ignore_errors_option(),
    git_pull: bool = git_pull_option(),
    offline: bool = offline_option(),
    threshold: Optional[float] = threshold_option(),
    change: Optional[List[str]] = change_option(),
    extrinsic: Optional[str] = extrinsic_option(),
    pallet: Optional[str] = pallet_option(),
    output_format: str = format_option(),
) -> None:
    """Compare the weight files of two revisions of a repository.

    The repository is reset to OLD and then to NEW; uncommitted changes in it
    are lost.

    [bold cyan]Examples:[/bold cyan]

      subweight compare commits v0.9.19 v0.9.20 --repo polkadot --method guess-worst

      subweight compare commits master my-branch --method base --change changed --threshold 10
    """
    with handle_errors():
        settings = resolve_settings(
            ctx,
            method=method,
            unit=unit,
            ignore_errors=ignore_errors,
            git_pull=git_pull,
            offline=offline,
            threshold=threshold,
            change=change,
            extrinsic=extrinsic,
            pallet=pallet,
            path_pattern=path_pattern,
            max_files=max_files,
        )
        diff = compare_commits(
            repo,
            old,
            new,
            settings.compare_params(),
            settings.filter_params(),
            path_pattern=settings.path_pattern,
            max_files=settings.max_files,
        )
        _report(diff, settings, output_format)


@compare_app.command(name="files")
def compare_files_cmd(
    ctx: typer.Context,
    old: List[Path] = typer.Option(
        ...,
        "--old",
        help="Old weight file (repeatable)",
        exists=True,
        dir_okay=False,
    ),
    new: List[Path] = typer.Option(
        ...,
        "--new",
        help="New weight file (repeatable)",
        exists=True,
        dir_okay=False,
    ),
    method: Optional[str] = method_option(),
    unit: Optional[str] = unit_option(),
    ignore_errors: bool = ignore_errors_option(),
    threshold: Optional[float] = threshold_option(),
    change: Optional[List[str]] = change_option(),
    extrinsic: Optional[str] = extrinsic_option(),
    pallet: Optional[str] = pallet_option(),
    output_format: str = format_option(),
) -> None:
    """Compare two sets of weight files.

    Extrinsics are matched by file name and function name.

    [bold cyan]Examples:[/bold cyan]

      subweight compare files --old old/balances.rs --new new/balances.rs --method base
    """
    with handle_errors():
        settings = resolve_settings(
            ctx,
            method=method,
            unit=unit,
            ignore_errors=ignore_errors,
            threshold=threshold,
            change=change,
            extrinsic=extrinsic,
            pallet=pallet,
        )
        diff = compare_paths(old, new, settings.compare_params(), settings.filter_params())
        _report(diff, settings, output_format)
