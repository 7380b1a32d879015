"""Rust syntax trees for weight files, built with tree-sitter."""

from typing import List, Optional

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

from ..exceptions import ParsingError
from ..logging_config import get_logger

logger = get_logger(__name__)

RUST = Language(tree_sitter_rust.language())

COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

_parser: Optional[Parser] = None


def _get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(RUST)
        logger.debug("Initialized tree-sitter Rust parser")
    return _parser


def parse_rust(source: str) -> Tree:
    """Parse Rust source, rejecting input with syntax errors.

    Raises:
        ParsingError: If tree-sitter reports an error or missing node.
    """
    tree = _get_parser().parse(source.encode("utf-8"))
    error = first_error(tree.root_node)
    if error is not None:
        row, column = error.start_point
        raise ParsingError(f"Syntax error at line {row + 1}, column {column + 1}")
    return tree


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node below ``node``, if any."""
    if not node.has_error:
        return None
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return node


def node_text(node: Node) -> str:
    if node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def code_children(node: Node) -> List[Node]:
    """Named children of ``node`` without comments."""
    return [child for child in node.named_children if child.type not in COMMENT_TYPES]


def required_field(node: Node, name: str) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise ParsingError(
            f"Missing {name} in {node.type} at line {node.start_point[0] + 1}"
        )
    return child


def last_segment(path: str) -> str:
    """``pallet::WeightInfo<T>`` -> ``WeightInfo``."""
    return path.split("<", 1)[0].split("::")[-1].strip()
