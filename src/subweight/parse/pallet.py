"""Extract weight functions from Substrate weight files.

A weight file contains a ``WeightInfo`` trait and one or more
implementations of it. The implementation for the runtime
(``SubstrateWeight<T>`` or ``WeightInfo<T>``) is preferred over the
``impl WeightInfo for ()`` fallback. Every ``fn name(..) -> Weight`` in it
becomes one :class:`~subweight.models.Extrinsic`.

The file is parsed into a tree-sitter syntax tree; component ranges come
from the doc comments directly preceding each function.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from tree_sitter import Node

from ..exceptions import ParsingError
from ..file_ops import read_text
from ..logging_config import get_logger
from ..models import ComponentRange, Extrinsic
from ..term import Term
from .expr import TermBuilder, body_expression, parse_int
from .syntax import COMMENT_TYPES, last_segment, node_text, parse_rust, required_field

logger = get_logger(__name__)

NO_IMPL_MESSAGE = "Could not find a weight implementation in the passed file"

_RANGE_RE = re.compile(r"The range of component `(\w+)` is `\[\s*([\d_]+)\s*,\s*([\d_]+)\s*\]`")


def _weight_impls(node: Node) -> Iterator[Node]:
    """Yield ``impl .. WeightInfo for ..`` items, descending into inline modules."""
    for child in node.named_children:
        if child.type == "impl_item":
            trait = child.child_by_field_name("trait")
            if trait is not None and last_segment(node_text(trait)) == "WeightInfo":
                yield child
        elif child.type == "mod_item":
            body = child.child_by_field_name("body")
            if body is not None:
                yield from _weight_impls(body)


def _find_impl(root: Node) -> Optional[Node]:
    candidates = list(_weight_impls(root))
    if not candidates:
        return None
    for impl in candidates:
        if node_text(required_field(impl, "type")) != "()":
            return impl
    return candidates[0]


def parse_component_ranges(comments: str) -> Dict[str, ComponentRange]:
    """Collect ``The range of component `x` is `[a, b]`.`` annotations."""
    ranges = {}
    for name, low, high in _RANGE_RE.findall(comments):
        ranges[name] = ComponentRange(min=parse_int(low), max=parse_int(high))
    return ranges


def _parse_function(function: Node) -> Term:
    return_type = function.child_by_field_name("return_type")
    if return_type is None or node_text(return_type) != "Weight":
        raise ParsingError("Expected a function returning Weight")
    return TermBuilder().build(body_expression(function))


def parse_content(content: str, pallet: str) -> List[Extrinsic]:
    """Parse the text of a weight file.

    Raises:
        ParsingError: If the file has syntax errors, no implementation is
            found, or a function body is not a supported weight expression.
    """
    tree = parse_rust(content)
    impl = _find_impl(tree.root_node)
    if impl is None:
        raise ParsingError(NO_IMPL_MESSAGE)

    extrinsics = []
    docs: List[str] = []
    for item in required_field(impl, "body").named_children:
        if item.type in COMMENT_TYPES:
            docs.append(node_text(item))
            continue
        if item.type == "attribute_item":
            continue
        if item.type != "function_item":
            docs = []
            continue

        name = node_text(required_field(item, "name"))
        ranges = parse_component_ranges("\n".join(docs))
        docs = []
        try:
            term = _parse_function(item)
        except ParsingError as e:
            raise ParsingError(f"Could not parse {pallet}::{name}: {e.message}") from e

        extrinsics.append(
            Extrinsic(
                pallet=pallet,
                name=name,
                term=term,
                component_ranges=ranges or None,
            )
        )

    logger.debug("Parsed %d extrinsics from %s", len(extrinsics), pallet)
    return extrinsics


def pallet_name(path: Path, repo: Optional[Path] = None) -> str:
    """Name extrinsics of ``path`` by their path in ``repo``, else by file name."""
    if repo is not None:
        try:
            return path.resolve().relative_to(repo.resolve()).as_posix()
        except ValueError:
            pass
    return path.name


def parse_file(path: Path, repo: Optional[Path] = None) -> List[Extrinsic]:
    """Parse one weight file.

    Raises:
        ParsingError: If the file cannot be read or parsed.
    """
    path = Path(path)
    content = read_text(path)
    try:
        return parse_content(content, pallet_name(path, repo))
    except ParsingError as e:
        raise ParsingError(e.message, filepath=path) from e


def parse_files(paths: Iterable[Path], repo: Optional[Path] = None) -> List[Extrinsic]:
    """Parse all files; the first failure aborts."""
    extrinsics: List[Extrinsic] = []
    for path in paths:
        extrinsics.extend(parse_file(path, repo))
    return extrinsics


def try_parse_files(paths: Iterable[Path], repo: Optional[Path] = None) -> List[Extrinsic]:
    """Parse all files, skipping the ones that fail."""
    extrinsics: List[Extrinsic] = []
    for path in paths:
        try:
            extrinsics.extend(parse_file(path, repo))
        except ParsingError as e:
            logger.warning("Skipping %s: %s", path, e.message)
    return extrinsics
