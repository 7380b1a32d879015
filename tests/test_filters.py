"""Tests for filtering and sorting a diff."""

import math

from subweight.config import FilterParams
from subweight.diff import (
    DiffKind,
    ExtrinsicDiff,
    TermChange,
    TermDiff,
    filter_changes,
    sort_changes,
)
from subweight.models import CompareMethod, RelativeChange
from subweight.scope import Scope
from subweight.term import Scalar


def entry(name, classification, pct=0.0):
    old = None if classification is RelativeChange.ADDED else Scalar(100)
    new = None if classification is RelativeChange.REMOVED else Scalar(100)
    change = TermChange(
        old=old,
        old_value=None if old is None else 100,
        new=new,
        new_value=None if new is None else 100,
        scope=Scope.empty(),
        percent=pct,
        classification=classification,
        method=CompareMethod.BASE,
    )
    return ExtrinsicDiff(name=name, pallet="pallet_test.rs", outcome=TermDiff.changed(change))


def failed(name):
    return ExtrinsicDiff(name=name, pallet="pallet_test.rs", outcome=TermDiff.failed("boom"))


def names(diff):
    return [d.name for d in diff]


class TestFilterChanges:
    """Test which entries survive filtering."""

    def test_threshold_drops_small_changes(self):
        diff = [
            entry("small", RelativeChange.CHANGED, 4.999),
            entry("edge", RelativeChange.CHANGED, 5.0),
            entry("big", RelativeChange.CHANGED, 5.001),
            entry("faster", RelativeChange.CHANGED, -6.0),
            entry("slightly_faster", RelativeChange.CHANGED, -4.999),
        ]
        kept = filter_changes(diff, FilterParams(threshold=5))
        assert names(kept) == ["edge", "big", "faster"]

    def test_unchanged_only_shown_at_zero_threshold(self):
        diff = [entry("same", RelativeChange.UNCHANGED)]
        assert filter_changes(diff, FilterParams(threshold=5)) == []
        assert filter_changes(diff, FilterParams(threshold=0.000001)) == []
        assert names(filter_changes(diff, FilterParams(threshold=0))) == ["same"]

    def test_added_and_removed_ignore_threshold(self):
        diff = [
            entry("new", RelativeChange.ADDED, math.inf),
            entry("gone", RelativeChange.REMOVED, 0.0),
        ]
        assert names(filter_changes(diff, FilterParams(threshold=50))) == ["new", "gone"]

    def test_change_allowlist(self):
        diff = [
            entry("new", RelativeChange.ADDED),
            entry("gone", RelativeChange.REMOVED),
            entry("big", RelativeChange.CHANGED, 20.0),
        ]
        params = FilterParams(threshold=0, change=frozenset({RelativeChange.ADDED}))
        assert names(filter_changes(diff, params)) == ["new"]

    def test_failed_entries_are_always_kept(self):
        diff = [failed("broken"), entry("big", RelativeChange.CHANGED, 20.0)]
        params = FilterParams(threshold=100, change=frozenset({RelativeChange.ADDED}))
        result = filter_changes(diff, params)
        assert names(result) == ["broken"]
        assert result[0].outcome.kind is DiffKind.FAILED


class TestSortChanges:
    """Test the report order."""

    def test_order(self):
        diff = [
            entry("big", RelativeChange.CHANGED, 30.0),
            entry("gone", RelativeChange.REMOVED),
            entry("faster", RelativeChange.CHANGED, -10.0),
            failed("broken"),
            entry("new", RelativeChange.ADDED, math.inf),
            entry("same", RelativeChange.UNCHANGED),
        ]
        assert names(sort_changes(diff)) == ["broken", "same", "new", "gone", "faster", "big"]

    def test_equal_keys_keep_input_order(self):
        diff = [
            entry("b", RelativeChange.CHANGED, 1.0001),
            entry("a", RelativeChange.CHANGED, 1.0004),
            failed("y"),
            failed("x"),
        ]
        assert names(sort_changes(diff)) == ["y", "x", "b", "a"]

    def test_returns_new_list(self):
        diff = [entry("big", RelativeChange.CHANGED, 30.0), failed("broken")]
        result = sort_changes(diff)
        assert names(diff) == ["big", "broken"]
        assert names(result) == ["broken", "big"]
