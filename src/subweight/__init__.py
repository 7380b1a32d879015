"""
subweight - compare Substrate weight files

Parses the benchmark weight functions of a Substrate runtime into symbolic
terms and reports how their cost changed between two revisions or files.
"""

__version__ = "3.0.1"

from .api import compare_commits, compare_files, compare_paths  # noqa: E402
from .config import CompareParams, FilterParams  # noqa: E402
from .diff import filter_changes, sort_changes  # noqa: E402
from .models import CompareMethod, Dimension, RelativeChange  # noqa: E402

__all__ = [
    "compare_commits",  # Compare two git revisions
    "compare_files",  # Pure core entry point
    "compare_paths",
    "filter_changes",
    "sort_changes",
    "CompareParams",
    "FilterParams",
    "CompareMethod",
    "Dimension",
    "RelativeChange",
]
