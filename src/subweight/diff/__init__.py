"""Diff layer: corner scopes, formula comparison and diff post-processing."""

from .engine import compare_extrinsics, compare_files, compare_terms, sanity_check_term
from .filters import filter_changes, sort_changes
from .models import DiffKind, ExtrinsicDiff, TermChange, TermDiff, TotalDiff
from .ranges import extend_scoped_components, instance_component

__all__ = [
    "DiffKind",
    "ExtrinsicDiff",
    "TermChange",
    "TermDiff",
    "TotalDiff",
    "compare_extrinsics",
    "compare_files",
    "compare_terms",
    "extend_scoped_components",
    "filter_changes",
    "instance_component",
    "sanity_check_term",
    "sort_changes",
]
