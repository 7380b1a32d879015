"""
File operations for subweight.

Reading weight files and expanding the path patterns that select them.
"""

import glob
from pathlib import Path
from typing import List

from .exceptions import ParsingError, TooManyFilesError
from .logging_config import get_logger

logger = get_logger(__name__)

# Module files only re-export the weight files next to them.
SKIPPED_FILE_NAMES = frozenset({"mod.rs"})


def read_text(filepath: Path, encoding: str = "utf-8", errors: str = "replace") -> str:
    """
    Read a weight file.

    Raises:
        ParsingError: If the file cannot be read
    """
    try:
        with open(filepath, encoding=encoding, errors=errors) as f:
            return f.read()
    except OSError as e:
        raise ParsingError(f"Could not read file: {e.strerror or e}", filepath=Path(filepath))


def list_files(base_path: Path, pattern: str, max_files: int) -> List[Path]:
    """
    Expand comma separated glob patterns below ``base_path``.

    Args:
        base_path: Directory the patterns are relative to
        pattern: One or more globs separated by commas, e.g. ``a/*.rs,b/*.rs``
        max_files: Maximum number of files the patterns may select

    Returns:
        Sorted, deduplicated list of matching files, without ``mod.rs``

    Raises:
        TooManyFilesError: If the patterns select more than ``max_files`` files
    """
    paths: List[Path] = []
    for part in pattern.split(","):
        full = str(Path(base_path) / part.strip())
        logger.info("Listing files matching: %s", full)
        files = [
            Path(f) for f in glob.glob(full, recursive=True)
            if Path(f).name not in SKIPPED_FILE_NAMES and Path(f).is_file()
        ]
        paths.extend(files)
        if len(paths) > max_files:
            raise TooManyFilesError(len(paths), max_files)
    return sorted(set(paths))
