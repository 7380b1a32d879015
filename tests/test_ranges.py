"""Tests for component resolution and corner scope generation."""

import pytest

from subweight.diff.ranges import (
    MAX_COMPONENTS,
    extend_scoped_components,
    instance_component,
)
from subweight.exceptions import RangeResolutionError, TooManyComponentsError
from subweight.models import (
    CompareMethod,
    ComponentInstanceStrategy,
    ComponentRange,
    Dimension,
    Extrinsic,
)
from subweight.scope import Scope
from subweight.term import READ, WRITE, Add, Mul, Scalar, Var


def make_extrinsic(name, term, pallet="pallet_test.rs", ranges=None):
    return Extrinsic(pallet=pallet, name=name, term=term, component_ranges=ranges)


GUESS_MIN = ComponentInstanceStrategy.guess_min()
GUESS_MAX = ComponentInstanceStrategy.guess_max()
EXACT_MIN = ComponentInstanceStrategy.exact_min()
EXACT_MAX = ComponentInstanceStrategy.exact_max()


def _resolve(old, new, strategy):
    return instance_component("c", old, new, strategy, "pallet_test.rs", "call")


class TestInstanceComponent:
    """Test the four-way range reconciliation."""

    def test_only_old_declares(self):
        ranges = {"c": ComponentRange(2, 10)}
        assert _resolve(ranges, None, EXACT_MIN) == 2
        assert _resolve(ranges, {}, GUESS_MAX) == 10

    def test_only_new_declares(self):
        ranges = {"c": ComponentRange(2, 10)}
        assert _resolve(None, ranges, EXACT_MAX) == 10
        assert _resolve({}, ranges, GUESS_MIN) == 2

    def test_both_declare_the_same(self):
        ranges = {"c": ComponentRange(2, 10)}
        assert _resolve(ranges, dict(ranges), EXACT_MIN) == 2
        assert _resolve(ranges, dict(ranges), EXACT_MAX) == 10

    def test_differing_ranges_are_unioned_when_guessing(self):
        old = {"c": ComponentRange(2, 10)}
        new = {"c": ComponentRange(0, 8)}
        assert _resolve(old, new, GUESS_MIN) == 0
        assert _resolve(old, new, GUESS_MAX) == 10

    def test_differing_ranges_fail_when_exact(self):
        old = {"c": ComponentRange(2, 10)}
        new = {"c": ComponentRange(0, 8)}
        with pytest.raises(RangeResolutionError) as exc:
            _resolve(old, new, EXACT_MAX)
        assert "different ranges" in exc.value.message
        assert exc.value.component == "c"

    def test_no_range_is_guessed(self):
        assert _resolve(None, None, GUESS_MIN) == 0
        assert _resolve(None, None, GUESS_MAX) == 100

    def test_no_range_fails_when_exact(self):
        with pytest.raises(RangeResolutionError) as exc:
            _resolve(None, None, EXACT_MIN)
        assert "No range for component c" in exc.value.message


class TestExtendScopedComponents:
    """Test corner scope generation."""

    def setup_method(self):
        self.base = Scope.for_dimension(Dimension.TIME)

    def test_guess_worst_tries_both_bounds(self):
        ext = make_extrinsic("call", Add(Scalar(1), Mul(Scalar(2), Var("c"))))
        scopes = extend_scoped_components(ext, ext, CompareMethod.GUESS_WORST, self.base)
        assert [s.get("c") for s in scopes] == [0, 100]
        assert all(s.get(READ) == 25_000_000 for s in scopes)

    def test_base_only_tries_minimum(self):
        ext = make_extrinsic("call", Mul(Scalar(2), Var("c")), ranges={"c": ComponentRange(5, 50)})
        scopes = extend_scoped_components(ext, None, CompareMethod.BASE, self.base)
        assert [s.get("c") for s in scopes] == [5]

    def test_asymptotic_only_tries_maximum(self):
        ext = make_extrinsic("call", Mul(Scalar(2), Var("c")), ranges={"c": ComponentRange(5, 50)})
        scopes = extend_scoped_components(None, ext, CompareMethod.ASYMPTOTIC, self.base)
        assert [s.get("c") for s in scopes] == [50]

    def test_asymptotic_needs_ranges(self):
        ext = make_extrinsic("call", Mul(Scalar(2), Var("c")))
        with pytest.raises(RangeResolutionError):
            extend_scoped_components(ext, ext, CompareMethod.ASYMPTOTIC, self.base)

    def test_cartesian_product_of_components(self):
        old = make_extrinsic("call", Add(Var("a"), Var("b")))
        new = make_extrinsic("call", Add(Var("b"), Var("c")))
        scopes = extend_scoped_components(old, new, CompareMethod.GUESS_WORST, self.base)
        assert len(scopes) == 8
        assert scopes == sorted(scopes)
        assert len(set(scopes)) == 8

    def test_equal_bounds_collapse(self):
        ext = make_extrinsic("call", Var("c"), ranges={"c": ComponentRange(7, 7)})
        scopes = extend_scoped_components(ext, ext, CompareMethod.EXACT_WORST, self.base)
        assert len(scopes) == 1

    def test_storage_variables_are_not_components(self):
        ext = make_extrinsic("call", Add(Mul(Scalar(3), Var(READ)), Var(WRITE)))
        scopes = extend_scoped_components(ext, ext, CompareMethod.EXACT_WORST, self.base)
        assert scopes == [self.base]

    def test_too_many_components(self):
        term = Scalar(0)
        for i in range(MAX_COMPONENTS + 1):
            term = Add(term, Var(f"c{i}"))
        ext = make_extrinsic("call", term)
        with pytest.raises(TooManyComponentsError) as exc:
            extend_scoped_components(ext, ext, CompareMethod.BASE, self.base)
        assert "has 17 components - limit is 16" in exc.value.message
