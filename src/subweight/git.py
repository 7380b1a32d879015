"""Check out revisions of a repository via the git CLI."""

import subprocess
from pathlib import Path
from typing import List

from .exceptions import RevisionControlError
from .logging_config import get_logger

logger = get_logger(__name__)

GIT_TIMEOUT_SECONDS = 300


def _git(path: Path, args: List[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=str(path),
        capture_output=True,
        text=True,
        timeout=GIT_TIMEOUT_SECONDS,
    )


def reset(path: Path, refname: str, pull: bool) -> None:
    """Hard-reset the work tree at ``path`` to ``refname``.

    With ``pull``, ``origin <refname>`` is fetched first and a failed fetch is
    fatal. The reset tries ``origin/<refname>`` and falls back to the bare
    ``refname`` so that tags and commit hashes work as well.

    Raises:
        RevisionControlError: If the fetch fails or both resets fail.
    """
    if pull:
        logger.info("Fetching branch %s", refname)
        try:
            result = _git(path, ["fetch", "origin", refname])
        except (OSError, subprocess.TimeoutExpired) as e:
            raise RevisionControlError(f"Failed to fetch branch: {e}")
        if result.returncode != 0:
            raise RevisionControlError(
                f"Failed to fetch branch: {result.stderr.strip()}", stderr=result.stderr
            )
    else:
        logger.debug("Not fetching branch %s (should_fetch=%s)", refname, pull)

    logger.info("Resetting to origin/%s", refname)
    try:
        result = _git(path, ["reset", "--hard", f"origin/{refname}"])
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.info("Failed to reset to origin/%s: %s", refname, e)
    else:
        if result.returncode == 0:
            return
        logger.info("Failed to reset to origin/%s: %s", refname, result.stderr.strip())

    logger.info("Fallback: Resetting to %s", refname)
    try:
        result = _git(path, ["reset", "--hard", refname])
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RevisionControlError(f"Failed to reset branch: {e}")
    if result.returncode != 0:
        raise RevisionControlError(
            f"Failed to reset branch: {result.stderr.strip()}", stderr=result.stderr
        )
