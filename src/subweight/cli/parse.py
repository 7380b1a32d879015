"""Parse command: check that weight files are understood."""

from pathlib import Path
from typing import List, Optional

import typer

from ..file_ops import list_files
from ..formatters import ParseFormatter
from ..logging_config import get_logger
from ..parse import parse_files, try_parse_files
from . import parse_app
from ._common import handle_errors, ignore_errors_option, resolve_settings

logger = get_logger(__name__)


def _expand(paths: List[Path], max_files: int) -> List[Path]:
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(list_files(path, "*", max_files))
        else:
            files.append(path)
    return files


@parse_app.command(name="files")
def parse_files_cmd(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., help="Weight files or folders containing them", exists=True),
    max_files: Optional[int] = typer.Option(
        None,
        "--max-files",
        help="Abort if a folder contains more files than this",
        min=1,
    ),
    ignore_errors: bool = ignore_errors_option(),
    formulas: bool = typer.Option(False, "--formulas", help="Print every parsed formula"),
) -> None:
    """Tries to parse all files in the given file list or folder.

    [bold cyan]Examples:[/bold cyan]

      subweight parse files runtime/polkadot/src/weights

      subweight parse files pallet_balances.rs --formulas
    """
    with handle_errors():
        settings = resolve_settings(ctx, ignore_errors=ignore_errors, max_files=max_files)
        files = _expand(paths, settings.max_files)
        logger.info("Parsing %d files", len(files))
        if settings.ignore_errors:
            extrinsics = try_parse_files(files)
        else:
            extrinsics = parse_files(files)
        ParseFormatter(show_formulas=formulas).render(extrinsics, len(files))
