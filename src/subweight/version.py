"""Version of the running tool.

The value is computed once when the CLI starts and handed to whatever needs
it; nothing re-derives it later.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import __version__

UNKNOWN = "unknown"


@dataclass(frozen=True)
class VersionInfo:
    """Package version plus the git description of the source tree."""

    package: str
    version: str
    git: str = UNKNOWN

    @classmethod
    def detect(cls, source_dir: Optional[Path] = None) -> "VersionInfo":
        """Describe the checkout this package runs from, if it is one."""
        source_dir = source_dir or Path(__file__).resolve().parent
        try:
            result = subprocess.run(
                ["git", "describe", "--dirty", "--always"],
                cwd=str(source_dir),
                capture_output=True,
                text=True,
                timeout=5,
            )
            git = result.stdout.strip() if result.returncode == 0 else ""
        except (OSError, subprocess.TimeoutExpired):
            git = ""
        return cls(package="subweight", version=__version__, git=git or UNKNOWN)

    @property
    def dirty(self) -> bool:
        return "dirty" in self.git

    def __str__(self) -> str:
        return f"{self.package} {self.version}+{self.git}"
