"""Symbolic weight terms.

A weight function body is parsed into a small expression tree::

    Add(Value(Weight(38_561_000, 3593)), Mul(Scalar(1), Var("READ")))

Before the dimension split, ``Value`` leaves hold two-dimensional
:class:`Weight` literals. :meth:`Term.simplify` projects them onto one
dimension, after which every leaf is a plain unsigned integer. All arithmetic
saturates at the u128 bound, mirroring the ``saturating_*`` calls the terms
are parsed from.

Terms are immutable and compare structurally. Structural equality is only
ever used as a fast "definitely unchanged" check, never as a proof that two
formulas are semantically different.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Set, Union

from .exceptions import EvalError, SimplifyError
from .models import Dimension

if TYPE_CHECKING:
    from .scope import Scope

U128_MAX = 2**128 - 1

# Pseudo-variables standing for one storage read and one storage write.
READ = "READ"
WRITE = "WRITE"


def _check_u128(value: int) -> None:
    if not 0 <= value <= U128_MAX:
        raise ValueError(f"Value out of u128 range: {value}")


def saturating_add(a: int, b: int) -> int:
    return min(U128_MAX, a + b)


def saturating_mul(a: int, b: int) -> int:
    return min(U128_MAX, a * b)


@dataclass(frozen=True)
class Weight:
    """A two-dimensional weight literal."""

    ref_time: int
    proof_size: int = 0

    def __post_init__(self) -> None:
        _check_u128(self.ref_time)
        _check_u128(self.proof_size)

    def project(self, dimension: Dimension) -> int:
        if dimension is Dimension.TIME:
            return self.ref_time
        return self.proof_size

    def __str__(self) -> str:
        return f"Weight({self.ref_time}, {self.proof_size})"


class Term(ABC):
    """Base class of all term nodes."""

    @abstractmethod
    def substitute(self, name: str, replacement: "Term") -> "Term":
        """Return a copy with every ``Var(name)`` replaced."""

    @abstractmethod
    def free_vars(self, scope: "Scope") -> Set[str]:
        """Variables referenced by this term that ``scope`` does not bind."""

    @abstractmethod
    def eval(self, scope: "Scope") -> int:
        """Evaluate a simplified term with every variable bound by ``scope``."""

    @abstractmethod
    def find_largest_factor(self, name: str) -> Optional[int]:
        """Largest constant coefficient multiplying ``name`` anywhere in the tree."""

    @abstractmethod
    def simplify(self, dimension: Dimension) -> "Term":
        """Project onto ``dimension`` and fold constants."""

    def constant(self) -> Optional[int]:
        """The value of this term if it is a one-dimensional constant."""
        return None

    def has_weight(self) -> bool:
        """Whether any two-dimensional weight literal is left in the tree."""
        return False

    def variables(self) -> Set[str]:
        from .scope import Scope

        return self.free_vars(Scope.empty())

    def __add__(self, other: "Term") -> "Term":
        return Add(self, other)

    def __mul__(self, other: "Term") -> "Term":
        return Mul(self, other)


@dataclass(frozen=True)
class Value(Term):
    """A weight literal; two-dimensional until simplified."""

    value: Union[Weight, int]

    def substitute(self, name, replacement):
        return self

    def free_vars(self, scope):
        return set()

    def eval(self, scope):
        if isinstance(self.value, Weight):
            raise SimplifyError("Term must be simplified before it can be evaluated")
        return self.value

    def find_largest_factor(self, name):
        return None

    def simplify(self, dimension):
        if isinstance(self.value, Weight):
            return Scalar(self.value.project(dimension))
        return Scalar(self.value)

    def constant(self):
        return None if isinstance(self.value, Weight) else self.value

    def has_weight(self):
        return isinstance(self.value, Weight)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Scalar(Term):
    """A dimensionless constant."""

    value: int

    def __post_init__(self) -> None:
        _check_u128(self.value)

    def substitute(self, name, replacement):
        return self

    def free_vars(self, scope):
        return set()

    def eval(self, scope):
        return self.value

    def find_largest_factor(self, name):
        return None

    def simplify(self, dimension):
        return self

    def constant(self):
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Var(Term):
    """A named component or storage pseudo-variable."""

    name: str

    def substitute(self, name, replacement):
        return replacement if self.name == name else self

    def free_vars(self, scope):
        return set() if self.name in scope else {self.name}

    def eval(self, scope):
        value = scope.get(self.name)
        if value is None:
            raise EvalError(self.name)
        return value

    def find_largest_factor(self, name):
        return 1 if self.name == name else None

    def simplify(self, dimension):
        return self

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class _Binary(Term):
    lhs: Term
    rhs: Term

    def substitute(self, name, replacement):
        return type(self)(
            self.lhs.substitute(name, replacement),
            self.rhs.substitute(name, replacement),
        )

    def free_vars(self, scope):
        return self.lhs.free_vars(scope) | self.rhs.free_vars(scope)

    def find_largest_factor(self, name):
        return _max_opt(
            self.lhs.find_largest_factor(name), self.rhs.find_largest_factor(name)
        )

    def has_weight(self):
        return self.lhs.has_weight() or self.rhs.has_weight()


@dataclass(frozen=True)
class Add(_Binary):
    def eval(self, scope):
        return saturating_add(self.lhs.eval(scope), self.rhs.eval(scope))

    def simplify(self, dimension):
        lhs, rhs = self.lhs.simplify(dimension), self.rhs.simplify(dimension)
        a, b = lhs.constant(), rhs.constant()
        if a is not None and b is not None:
            return Scalar(saturating_add(a, b))
        if a == 0:
            return rhs
        if b == 0:
            return lhs
        return Add(lhs, rhs)

    def constant(self):
        a, b = self.lhs.constant(), self.rhs.constant()
        if a is None or b is None:
            return None
        return saturating_add(a, b)

    def __str__(self) -> str:
        return f"{self.lhs} + {self.rhs}"


@dataclass(frozen=True)
class Mul(_Binary):
    def eval(self, scope):
        return saturating_mul(self.lhs.eval(scope), self.rhs.eval(scope))

    def find_largest_factor(self, name):
        a, b = self.lhs.constant(), self.rhs.constant()
        if a is not None:
            inner = self.rhs.find_largest_factor(name)
            return None if inner is None else saturating_mul(a, inner)
        if b is not None:
            inner = self.lhs.find_largest_factor(name)
            return None if inner is None else saturating_mul(b, inner)
        return super().find_largest_factor(name)

    def simplify(self, dimension):
        if self.lhs.has_weight() and self.rhs.has_weight():
            raise SimplifyError(f"Cannot multiply two weights: {self}")
        lhs, rhs = self.lhs.simplify(dimension), self.rhs.simplify(dimension)
        a, b = lhs.constant(), rhs.constant()
        if a is not None and b is not None:
            return Scalar(saturating_mul(a, b))
        if a == 0 or b == 0:
            return Scalar(0)
        if a == 1:
            return rhs
        if b == 1:
            return lhs
        return Mul(lhs, rhs)

    def constant(self):
        a, b = self.lhs.constant(), self.rhs.constant()
        if a is None or b is None:
            return None
        return saturating_mul(a, b)

    def __str__(self) -> str:
        return f"{_paren(self.lhs)} * {_paren(self.rhs)}"


@dataclass(frozen=True)
class Max(_Binary):
    """The larger of two terms; worst-case combination of alternatives."""

    def eval(self, scope):
        return max(self.lhs.eval(scope), self.rhs.eval(scope))

    def simplify(self, dimension):
        lhs, rhs = self.lhs.simplify(dimension), self.rhs.simplify(dimension)
        a, b = lhs.constant(), rhs.constant()
        if a is not None and b is not None:
            return Scalar(max(a, b))
        return Max(lhs, rhs)

    def constant(self):
        a, b = self.lhs.constant(), self.rhs.constant()
        if a is None or b is None:
            return None
        return max(a, b)

    def __str__(self) -> str:
        return f"max({self.lhs}, {self.rhs})"


def _paren(term: Term) -> str:
    if isinstance(term, Add):
        return f"({term})"
    return str(term)


def _max_opt(a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)
