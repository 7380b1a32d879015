"""Public API for subweight.

Example:
    >>> from pathlib import Path
    >>> from subweight import CompareMethod, CompareParams, FilterParams, compare_commits
    >>>
    >>> diff = compare_commits(
    ...     Path("polkadot"),
    ...     "v0.9.19",
    ...     "v0.9.20",
    ...     CompareParams(method=CompareMethod.GUESS_WORST),
    ...     FilterParams(threshold=10),
    ... )
"""

from pathlib import Path
from typing import Iterable, List, Optional

from . import git
from .config import DEFAULT_MAX_FILES, DEFAULT_PATH_PATTERN, CompareParams, FilterParams
from .diff import TotalDiff, compare_files
from .exceptions import InvalidPathError
from .file_ops import list_files
from .logging_config import get_logger
from .models import Extrinsic
from .parse import parse_files, try_parse_files

logger = get_logger(__name__)

__all__ = ["compare_commits", "compare_files", "compare_paths"]


def _parse(
    paths: Iterable[Path], params: CompareParams, repo: Optional[Path] = None
) -> List[Extrinsic]:
    if params.ignore_errors:
        return try_parse_files(paths, repo)
    return parse_files(paths, repo)


def _extrinsics_at(
    repo: Path, refname: str, params: CompareParams, path_pattern: str, max_files: int
) -> List[Extrinsic]:
    git.reset(repo, refname, params.should_pull())
    paths = list_files(repo, path_pattern, max_files)
    logger.info("Parsing %d files at %s", len(paths), refname)
    return _parse(paths, params, repo)


def compare_commits(
    repo: Path,
    old: str,
    new: str,
    params: CompareParams,
    filter_params: FilterParams,
    path_pattern: str = DEFAULT_PATH_PATTERN,
    max_files: int = DEFAULT_MAX_FILES,
) -> TotalDiff:
    """Compare the weight files of two revisions of one repository.

    The work tree at ``repo`` is reset to ``old``, parsed, then reset to
    ``new`` and parsed again; it is left at ``new``. Extrinsics are named by
    their file path relative to ``repo``.

    Raises:
        InvalidPathError: If ``path_pattern`` contains ``..``.
        RevisionControlError: If a revision cannot be checked out.
        TooManyFilesError: If the pattern selects more than ``max_files``.
        ParsingError: If a file fails to parse and errors are not ignored.
    """
    if ".." in path_pattern:
        raise InvalidPathError(path_pattern, "Path pattern cannot contain '..'")
    repo = Path(repo)

    olds = _extrinsics_at(repo, old, params, path_pattern, max_files)
    news = _extrinsics_at(repo, new, params, path_pattern, max_files)
    return compare_files(olds, news, params, filter_params)


def compare_paths(
    old_paths: Iterable[Path],
    new_paths: Iterable[Path],
    params: CompareParams,
    filter_params: FilterParams,
) -> TotalDiff:
    """Compare two explicit sets of weight files.

    Extrinsics are named by file name, so ``old/balances.rs`` is compared
    against ``new/balances.rs``.
    """
    olds = _parse([Path(p) for p in old_paths], params)
    news = _parse([Path(p) for p in new_paths], params)
    return compare_files(olds, news, params, filter_params)
