"""Data models for weight diffing: per-scope changes and per-extrinsic outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..models import CompareMethod, ExtrinsicName, PalletName, Percent, RelativeChange, percent_key
from ..scope import Scope
from ..term import Term


@dataclass(frozen=True)
class TermChange:
    """Comparison of an old and a new formula at one scope.

    Exactly one of ``old``/``new`` is None when the extrinsic was added or
    removed; ``percent`` carries no meaning in that case.
    """

    old: Optional[Term]
    old_value: Optional[int]
    new: Optional[Term]
    new_value: Optional[int]
    scope: Scope
    percent: Percent
    classification: RelativeChange
    method: CompareMethod

    def sort_key(self) -> Tuple[int, int]:
        """Order by classification first, then by the truncated x1000 percentage."""
        return (self.classification.rank, percent_key(self.percent))


class DiffKind(str, Enum):
    CHANGED = "changed"
    WARNING = "warning"
    FAILED = "failed"


@dataclass(frozen=True)
class TermDiff:
    """Outcome of comparing one extrinsic.

    ``WARNING`` keeps the computed change but flags it as suspicious,
    ``FAILED`` carries only the reason the comparison could not be done.
    """

    kind: DiffKind
    change: Optional[TermChange] = None
    message: Optional[str] = None

    @classmethod
    def changed(cls, change: TermChange) -> "TermDiff":
        return cls(DiffKind.CHANGED, change=change)

    @classmethod
    def warning(cls, change: TermChange, reason: str) -> "TermDiff":
        return cls(DiffKind.WARNING, change=change, message=reason)

    @classmethod
    def failed(cls, reason: str) -> "TermDiff":
        return cls(DiffKind.FAILED, message=reason)

    def sort_key(self) -> tuple:
        # Failed sorts first; warnings and changes only by their payload.
        if self.kind is DiffKind.FAILED or self.change is None:
            return (0,)
        return (1,) + self.change.sort_key()


@dataclass(frozen=True)
class ExtrinsicDiff:
    """The single judgement for one ``(pallet, extrinsic)`` identity."""

    name: ExtrinsicName
    pallet: PalletName
    outcome: TermDiff

    def term(self) -> Optional[TermChange]:
        if self.outcome.kind is DiffKind.FAILED:
            return None
        return self.outcome.change

    def error(self) -> Optional[str]:
        if self.outcome.kind is DiffKind.FAILED:
            return self.outcome.message
        return None

    def warning(self) -> Optional[str]:
        if self.outcome.kind is DiffKind.WARNING:
            return self.outcome.message
        return None


TotalDiff = List[ExtrinsicDiff]
