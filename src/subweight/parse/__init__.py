"""Parsing front-end: weight files to extrinsic records."""

from .expr import parse_expression
from .pallet import (
    NO_IMPL_MESSAGE,
    parse_component_ranges,
    parse_content,
    parse_file,
    parse_files,
    try_parse_files,
)

__all__ = [
    "NO_IMPL_MESSAGE",
    "parse_component_ranges",
    "parse_content",
    "parse_expression",
    "parse_file",
    "parse_files",
    "try_parse_files",
]
