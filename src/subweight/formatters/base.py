"""Base formatter interface for subweight output rendering."""

from abc import ABC, abstractmethod

from ..diff import TotalDiff
from ..models import Dimension


class BaseFormatter(ABC):
    """Abstract base class for diff formatters."""

    @abstractmethod
    def render(self, diff: TotalDiff, unit: Dimension) -> None:
        """Print the diff to stdout."""

    @abstractmethod
    def format(self, diff: TotalDiff, unit: Dimension) -> str:
        """Return formatted string representation of the diff."""
