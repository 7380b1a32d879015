"""Build terms from the weight expression of a function body.

Understands the expression shapes emitted by the Substrate benchmarking
CLI, old and new::

    (70_952_000 as Weight)
        .saturating_add((1_000 as Weight).saturating_mul(c as Weight))
        .saturating_add(T::DbWeight::get().reads(1 as Weight))

    Weight::from_parts(15_665_000, 990)
        .saturating_add(Weight::from_parts(13_289_520, 0).saturating_mul(u.into()))
        .saturating_add(T::DbWeight::get().reads((1_u64).saturating_mul(u.into())))

Storage accesses become multiples of the ``READ``/``WRITE`` pseudo-variables.
"""

from __future__ import annotations

import re
from typing import List, Union

from tree_sitter import Node

from ..exceptions import ParsingError
from ..term import READ, WRITE, Add, Max, Mul, Scalar, Term, Value, Var, Weight
from .syntax import code_children, node_text, parse_rust, required_field

_INT_SUFFIX = r"(?:u8|u16|u32|u64|u128|usize)"

_WEIGHT_TYPES = {"Weight"}


class _DbWeight:
    """Receiver of ``reads``/``writes``; never part of a finished term."""


_DB_WEIGHT = _DbWeight()

Built = Union[Term, _DbWeight]


def parse_int(text: str) -> int:
    return int(re.sub(rf"_?{_INT_SUFFIX}$", "", text).replace("_", ""))


def _unsupported(node: Node, what: str = "expression") -> ParsingError:
    snippet = " ".join(node_text(node).split())
    if len(snippet) > 60:
        snippet = snippet[:57] + "..."
    return ParsingError(f"Unsupported {what} `{snippet}` at line {node.start_point[0] + 1}")


def _path_tail(node: Node) -> str:
    """Last segment of a path node, e.g. ``DbWeight`` for ``<T as Config>::DbWeight``."""
    if node.type == "scoped_identifier":
        return node_text(required_field(node, "name"))
    return node_text(node)


class TermBuilder:
    """Walks a tree-sitter expression node and produces a :class:`~subweight.term.Term`."""

    def build(self, node: Node) -> Term:
        return self._term(self._build(node))

    def _term(self, built: Built) -> Term:
        if isinstance(built, _DbWeight):
            raise ParsingError("DbWeight used without reads or writes")
        return built

    def _build(self, node: Node) -> Built:
        kind = node.type
        if kind == "integer_literal":
            return Scalar(parse_int(node_text(node)))
        if kind == "identifier":
            return Var(node_text(node))
        if kind == "parenthesized_expression":
            inner = code_children(node)
            if len(inner) != 1:
                raise _unsupported(node)
            return self._build(inner[0])
        if kind == "type_cast_expression":
            value = self._build(required_field(node, "value"))
            if node_text(required_field(node, "type")) in _WEIGHT_TYPES:
                return self._as_weight(self._term(value))
            return value
        if kind == "call_expression":
            return self._call(node)
        raise _unsupported(node)

    def _as_weight(self, term: Term) -> Term:
        # Legacy weights were plain numbers of reference time.
        if isinstance(term, Scalar):
            return Value(Weight(term.value, 0))
        return term

    def _call(self, node: Node) -> Built:
        function = required_field(node, "function")
        args = [self.build(arg) for arg in code_children(required_field(node, "arguments"))]

        if function.type == "field_expression":
            receiver = self._build(required_field(function, "value"))
            name = node_text(required_field(function, "field"))
            return self._method(receiver, name, args)
        if function.type == "scoped_identifier":
            return self._path_call(function, args)
        raise _unsupported(function, "call")

    def _path_call(self, function: Node, args: List[Term]) -> Built:
        name = node_text(required_field(function, "name"))
        path = function.child_by_field_name("path")
        owner = _path_tail(path) if path is not None else ""
        if name == "get" and owner.endswith("DbWeight") and not args:
            return _DB_WEIGHT
        if owner in _WEIGHT_TYPES:
            return self._weight_constructor(name, args)
        raise _unsupported(function, "call")

    def _weight_constructor(self, name: str, args: List[Term]) -> Term:
        values = [_constant(arg, name) for arg in args]
        if name == "from_parts" and len(values) == 2:
            return Value(Weight(values[0], values[1]))
        if name == "from_ref_time" and len(values) == 1:
            return Value(Weight(values[0], 0))
        if name == "from_proof_size" and len(values) == 1:
            return Value(Weight(0, values[0]))
        if name == "from_all" and len(values) == 1:
            return Value(Weight(values[0], values[0]))
        if name == "zero" and not values:
            return Value(Weight(0, 0))
        raise ParsingError(f"Unsupported weight constructor: Weight::{name}")

    def _method(self, receiver: Built, name: str, args: List[Term]) -> Built:
        if isinstance(receiver, _DbWeight):
            counts = [_as_count(arg) for arg in args]
            if name == "reads" and len(counts) == 1:
                return Mul(counts[0], Var(READ))
            if name == "writes" and len(counts) == 1:
                return Mul(counts[0], Var(WRITE))
            if name == "reads_writes" and len(counts) == 2:
                return Add(Mul(counts[0], Var(READ)), Mul(counts[1], Var(WRITE)))
            raise ParsingError(f"Unsupported DbWeight method: {name}")

        if name in ("into", "from") and not args:
            return receiver
        if len(args) != 1:
            raise ParsingError(f"Unsupported method call: {name} with {len(args)} arguments")
        if name in ("saturating_add", "add"):
            return Add(self._term(receiver), args[0])
        if name in ("saturating_mul", "mul"):
            return Mul(self._term(receiver), args[0])
        if name == "max":
            return Max(self._term(receiver), args[0])
        raise ParsingError(f"Unsupported method call: {name}")


def _as_count(term: Term) -> Term:
    """Undo ``as Weight`` casts inside a storage access count."""
    if isinstance(term, Value) and isinstance(term.value, Weight):
        return Scalar(term.value.ref_time)
    if isinstance(term, (Add, Mul, Max)):
        return type(term)(_as_count(term.lhs), _as_count(term.rhs))
    return term


def _constant(term: Term, context: str) -> int:
    if isinstance(term, Scalar):
        return term.value
    raise ParsingError(f"Weight::{context} expects constant arguments, got {term}")


def body_expression(function: Node) -> Node:
    """The single tail expression of a ``fn`` body."""
    statements = code_children(required_field(function, "body"))
    if len(statements) != 1:
        raise ParsingError(
            f"Expected a single weight expression, found {len(statements)} statements"
        )
    return statements[0]


def parse_expression(source: str) -> Term:
    """Parse one weight expression into a term."""
    tree = parse_rust(f"fn weight() -> Weight {{\n{source}\n}}")
    function = code_children(tree.root_node)[0]
    return TermBuilder().build(body_expression(function))
