"""Post-hoc filtering and ordering of a computed diff."""

from ..config import FilterParams
from ..models import RelativeChange
from .models import DiffKind, TotalDiff

# Thresholds below this count as "show everything", including unchanged entries.
ZERO_THRESHOLD = 0.000001


def filter_changes(diff: TotalDiff, params: FilterParams) -> TotalDiff:
    """Drop the entries that ``params`` deems irrelevant.

    Failed entries are always kept. Pallet and extrinsic names are already
    filtered while comparing.
    """
    kept = []
    for entry in diff:
        if entry.outcome.kind is DiffKind.FAILED:
            kept.append(entry)
            continue

        change = entry.outcome.change
        if not params.included(change.classification):
            continue
        if (
            change.classification is RelativeChange.CHANGED
            and abs(change.percent) < params.threshold
        ):
            continue
        if (
            change.classification is RelativeChange.UNCHANGED
            and params.threshold >= ZERO_THRESHOLD
        ):
            continue
        kept.append(entry)
    return kept


def sort_changes(diff: TotalDiff) -> TotalDiff:
    """Return the diff stably sorted from failures to the largest changes."""
    return sorted(diff, key=lambda entry: entry.outcome.sort_key())
