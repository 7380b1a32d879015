"""
Logging configuration for subweight.

Log records go to stderr through a rich handler so that reports printed on
stdout stay machine-readable.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route subweight log records to stderr, and optionally to a file.

    Warnings (skipped weight files, git fallbacks) are shown by default.
    Verbose runs add the per-formula debug lines of the compare engine.

    Args:
        verbose: Log at DEBUG, including every compared formula
        quiet: Only log errors
        log_file: Path that records are appended to in plain text, from
            `--log-file` or the `log_file` setting

    Returns:
        The `subweight` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console = Console(stderr=True)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger("subweight")
    logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger below the `subweight` hierarchy, e.g. for `subweight.diff.engine`."""
    if name is None:
        return logging.getLogger("subweight")

    if not name.startswith("subweight"):
        name = f"subweight.{name}"

    return logging.getLogger(name)
