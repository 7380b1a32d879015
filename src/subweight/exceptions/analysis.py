"""Analysis-related exceptions: parsing, term handling and comparison."""

from pathlib import Path
from typing import Optional

from .base import SubweightError


class AnalysisError(SubweightError):
    """Base class for analysis-related errors."""

    pass


class ParsingError(AnalysisError):
    """Raised when a weight file cannot be parsed."""

    def __init__(self, reason: str, filepath: Optional[Path] = None):
        details = {"filepath": str(filepath)} if filepath is not None else None
        super().__init__(reason, details=details)
        self.filepath = filepath
        self.reason = reason


class SimplifyError(AnalysisError):
    """Raised when a term cannot be projected onto a single dimension."""

    pass


class CompareError(AnalysisError):
    """A comparison of one formula failed.

    These errors are local to a single extrinsic; the diff engine records
    them as ``Failed`` entries and carries on with the rest.
    """

    pass


class EvalError(CompareError):
    """Raised when a term references a variable that the scope does not bind."""

    def __init__(self, variable: str):
        super().__init__(f"Variable '{variable}' is not bound in the scope")
        self.variable = variable


class TooManyComponentsError(CompareError):
    """Raised when a formula pair has more free components than can be enumerated."""

    def __init__(self, pallet: str, extrinsic: str, count: int, limit: int):
        super().__init__(
            f"Too many components to compare: {pallet}::{extrinsic} has {count} "
            f"components - limit is {limit}"
        )
        self.count = count
        self.limit = limit


class RangeResolutionError(CompareError):
    """Raised when an exact compare method cannot resolve a component bound."""

    def __init__(self, message: str, component: str):
        super().__init__(message)
        self.component = component


class InconclusiveComparisonError(SubweightError):
    """Internal contract violation while reducing corner evaluations.

    Deliberately not a ``CompareError``: this is a bug, not a property of the
    input, and must abort the run instead of being reported per formula.
    """

    pass
