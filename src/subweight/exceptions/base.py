"""Root of the subweight exception hierarchy.

Errors fall into these groups:

- Whole-run errors abort a command. ``ConfigurationError`` and its
  subclasses cover bad options, path patterns, file limits and git
  failures. ``ParsingError`` covers unreadable weight files unless errors
  are ignored. ``SimplifyError`` marks a formula outside the weight cost
  model, such as a product of two weights.
- Per-formula errors are ``CompareError`` and its subclasses (missing
  variables, too many components, unresolvable ranges). ``compare_files``
  turns each into a failed entry of the report and moves on.
- ``InconclusiveComparisonError`` signals a broken invariant while reducing
  corner evaluations and is never expected in practice.

The CLI maps every ``SubweightError`` to exit code 1 and prints
``message`` with ``details`` appended as ``(key=value, ...)``.
"""

from typing import Dict, Optional


class SubweightError(Exception):
    """Base exception for all subweight errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
