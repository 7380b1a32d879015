"""Exception hierarchy for subweight."""

from .analysis import (
    AnalysisError,
    CompareError,
    EvalError,
    InconclusiveComparisonError,
    ParsingError,
    RangeResolutionError,
    SimplifyError,
    TooManyComponentsError,
)
from .base import SubweightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    RevisionControlError,
    TooManyFilesError,
)

__all__ = [
    "SubweightError",
    "AnalysisError",
    "ParsingError",
    "SimplifyError",
    "CompareError",
    "EvalError",
    "TooManyComponentsError",
    "RangeResolutionError",
    "InconclusiveComparisonError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
    "TooManyFilesError",
    "RevisionControlError",
]
