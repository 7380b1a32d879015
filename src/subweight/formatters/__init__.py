"""Output formatters for subweight."""

from .base import BaseFormatter
from .json_formatter import JsonDiffFormatter
from .parse_formatter import ParseFormatter
from .rich_formatter import NO_CHANGES, RichDiffFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a diff formatter instance by name.

    Args:
        name: One of "rich", "json"

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "rich": RichDiffFormatter,
        "json": JsonDiffFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "JsonDiffFormatter",
    "NO_CHANGES",
    "ParseFormatter",
    "RichDiffFormatter",
    "get_formatter",
]
