"""Tests for the symbolic weight terms."""

import pytest

from subweight.exceptions import EvalError, SimplifyError
from subweight.models import Dimension
from subweight.scope import Scope
from subweight.term import (
    READ,
    U128_MAX,
    WRITE,
    Add,
    Max,
    Mul,
    Scalar,
    Term,
    Value,
    Var,
    Weight,
)


class TestEval:
    """Test evaluating terms against a scope."""

    def test_arithmetic(self):
        term = Add(Scalar(2), Mul(Scalar(3), Var("x")))
        assert term.eval(Scope.from_dict({"x": 4})) == 14

    def test_max(self):
        term = Max(Var("a"), Var("b"))
        assert term.eval(Scope.from_dict({"a": 3, "b": 9})) == 9

    def test_add_saturates(self):
        assert Add(Scalar(U128_MAX), Scalar(1)).eval(Scope.empty()) == U128_MAX

    def test_mul_saturates(self):
        assert Mul(Scalar(U128_MAX), Scalar(2)).eval(Scope.empty()) == U128_MAX

    def test_unbound_variable(self):
        with pytest.raises(EvalError) as exc:
            Add(Scalar(1), Var("c")).eval(Scope.empty())
        assert exc.value.variable == "c"

    def test_unsimplified_weight_cannot_be_evaluated(self):
        with pytest.raises(SimplifyError):
            Value(Weight(1, 2)).eval(Scope.empty())

    def test_operators_build_nodes(self):
        assert Scalar(1) + Var("x") == Add(Scalar(1), Var("x"))
        assert Scalar(2) * Var("x") == Mul(Scalar(2), Var("x"))


class TestConstruction:
    """Test node construction and equality."""

    def test_negative_scalar(self):
        with pytest.raises(ValueError):
            Scalar(-1)

    def test_scalar_above_u128(self):
        with pytest.raises(ValueError):
            Scalar(U128_MAX + 1)

    def test_structural_equality(self):
        assert Add(Scalar(1), Var("x")) == Add(Scalar(1), Var("x"))
        assert Add(Scalar(1), Var("x")) != Add(Var("x"), Scalar(1))
        assert hash(Mul(Scalar(1), Var("x"))) == hash(Mul(Scalar(1), Var("x")))

    def test_term_is_abstract(self):
        with pytest.raises(TypeError):
            Term()

    def test_node_must_implement_every_operation(self):
        class Partial(Term):
            def eval(self, scope):
                return 0

        with pytest.raises(TypeError):
            Partial()


class TestSimplify:
    """Test the dimension split."""

    def test_projects_time(self):
        term = Add(Value(Weight(10, 20)), Mul(Value(Weight(3, 4)), Var("c")))
        assert term.simplify(Dimension.TIME) == Add(Scalar(10), Mul(Scalar(3), Var("c")))

    def test_projects_proof(self):
        term = Add(Value(Weight(10, 20)), Mul(Value(Weight(3, 4)), Var("c")))
        assert term.simplify(Dimension.PROOF) == Add(Scalar(20), Mul(Scalar(4), Var("c")))

    def test_folds_constants(self):
        term = Add(Value(Weight(10, 0)), Mul(Scalar(2), Value(Weight(5, 0))))
        assert term.simplify(Dimension.TIME) == Scalar(20)

    def test_drops_neutral_elements(self):
        term = Add(Value(Weight(0, 7)), Mul(Scalar(1), Var(READ)))
        assert term.simplify(Dimension.TIME) == Var(READ)

    def test_multiplying_weights_fails(self):
        term = Mul(Value(Weight(1, 1)), Value(Weight(2, 2)))
        with pytest.raises(SimplifyError):
            term.simplify(Dimension.TIME)

    def test_result_has_no_weights(self):
        term = Max(Value(Weight(1, 2)), Add(Value(Weight(3, 4)), Var("x")))
        simplified = term.simplify(Dimension.PROOF)
        assert not simplified.has_weight()
        assert simplified.eval(Scope.from_dict({"x": 0})) == 4


class TestInspection:
    """Test free variables, substitution and factor search."""

    def test_free_vars(self):
        term = Add(Mul(Scalar(2), Var("c")), Mul(Scalar(1), Var(READ)))
        assert term.free_vars(Scope.empty()) == {"c", READ}
        assert term.free_vars(Scope.from_dict({READ: 1})) == {"c"}
        assert term.variables() == {"c", READ}

    def test_substitute(self):
        term = Add(Var("c"), Mul(Scalar(2), Var("c")))
        assert term.substitute("c", Scalar(5)).eval(Scope.empty()) == 15

    def test_largest_factor(self):
        term = Add(Mul(Scalar(3), Var(READ)), Mul(Var(READ), Scalar(7)))
        assert term.find_largest_factor(READ) == 7
        assert term.find_largest_factor(WRITE) is None

    def test_largest_factor_of_bare_variable(self):
        assert Add(Scalar(100), Var(WRITE)).find_largest_factor(WRITE) == 1

    def test_str(self):
        term = Add(Scalar(1), Mul(Add(Scalar(2), Var("x")), Var(READ)))
        assert str(term) == "1 + (2 + x) * READ"
        assert str(Max(Var("a"), Scalar(3))) == "max(a, 3)"
