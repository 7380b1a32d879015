"""Policy values and records shared by the parser, the comparator and the CLI.

Everything here is immutable. Enums carry their CLI spelling as value so that
typer can offer them as choices directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .term import Term

PalletName = str
ExtrinsicName = str
Percent = float


class Dimension(str, Enum):
    """The cost dimension a formula is projected onto.

    Called *unit* on the command line: it is a dimension together with the
    unit its values are measured in.
    """

    TIME = "time"  # picoseconds of reference time
    PROOF = "proof"  # bytes of proof-of-validity

    @classmethod
    def parse(cls, value: str) -> "Dimension":
        """Parse a CLI or config spelling; ``weight`` is an alias for ``time``."""
        lowered = value.lower()
        if lowered in ("time", "weight"):
            return cls.TIME
        if lowered == "proof":
            return cls.PROOF
        raise ValueError(f"Unknown unit: {value}")

    def fmt_value(self, value: int) -> str:
        if self is Dimension.TIME:
            return fmt_time(value)
        return fmt_proof(value)


def fmt_scalar(w: int) -> str:
    """Format a plain magnitude with K/M/G/T suffixes."""
    if w >= 1_000_000_000_000:
        return f"{w / 1_000_000_000_000:.2f}T"
    if w >= 1_000_000_000:
        return f"{w / 1_000_000_000:.2f}G"
    if w >= 1_000_000:
        return f"{w / 1_000_000:.2f}M"
    if w >= 1_000:
        return f"{w / 1_000:.2f}K"
    return str(w)


def fmt_time(t: int) -> str:
    """Format picoseconds."""
    if t >= 1_000_000_000_000:
        return f"{t / 1_000_000_000_000:.2f}s"
    if t >= 1_000_000_000:
        return f"{t / 1_000_000_000:.2f}ms"
    if t >= 1_000_000:
        return f"{t / 1_000_000:.2f}us"
    if t >= 1_000:
        return f"{t / 1_000:.2f}ns"
    return f"{t}ps"


_BYTE_PER_KIB = 1024
_BYTE_PER_MIB = _BYTE_PER_KIB * 1024
_BYTE_PER_GIB = _BYTE_PER_MIB * 1024


def fmt_proof(b: int) -> str:
    """Format a proof size in binary byte units."""
    if b >= _BYTE_PER_GIB:
        return f"{b / _BYTE_PER_GIB:.2f}GiB"
    if b >= _BYTE_PER_MIB:
        return f"{b / _BYTE_PER_MIB:.2f}MiB"
    if b >= _BYTE_PER_KIB:
        return f"{b / _BYTE_PER_KIB:.2f}KiB"
    return f"{b}B"


class MinOrMax(str, Enum):
    MIN = "min"
    MAX = "max"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ComponentInstanceStrategy:
    """How to pick one bound of a component.

    ``exact`` strategies refuse to guess when the declared ranges are missing
    or disagree between the two versions.
    """

    exact: bool
    min_or_max: MinOrMax

    @classmethod
    def exact_min(cls) -> "ComponentInstanceStrategy":
        return cls(exact=True, min_or_max=MinOrMax.MIN)

    @classmethod
    def exact_max(cls) -> "ComponentInstanceStrategy":
        return cls(exact=True, min_or_max=MinOrMax.MAX)

    @classmethod
    def guess_min(cls) -> "ComponentInstanceStrategy":
        return cls(exact=False, min_or_max=MinOrMax.MIN)

    @classmethod
    def guess_max(cls) -> "ComponentInstanceStrategy":
        return cls(exact=False, min_or_max=MinOrMax.MAX)


class CompareMethod(str, Enum):
    """Which component values are tried when comparing two formulas."""

    # The constant base weight of the extrinsic.
    BASE = "base"
    # Worst case increase over the guessed component ranges.
    GUESS_WORST = "guess-worst"
    # Worst case increase; errors if any component misses a range annotation.
    EXACT_WORST = "exact-worst"
    # All components at their exact maximum.
    ASYMPTOTIC = "asymptotic"

    @classmethod
    def parse(cls, value: str) -> "CompareMethod":
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown method: {value}") from None

    def min(self) -> ComponentInstanceStrategy:
        return _METHOD_POLICIES[self][0]

    def max(self) -> ComponentInstanceStrategy:
        return _METHOD_POLICIES[self][1]


# (low bound policy, high bound policy) per method.
_METHOD_POLICIES: Dict[CompareMethod, Tuple[ComponentInstanceStrategy, ComponentInstanceStrategy]] = {
    CompareMethod.BASE: (
        ComponentInstanceStrategy.guess_min(),
        ComponentInstanceStrategy.guess_min(),
    ),
    CompareMethod.GUESS_WORST: (
        ComponentInstanceStrategy.guess_min(),
        ComponentInstanceStrategy.guess_max(),
    ),
    CompareMethod.EXACT_WORST: (
        ComponentInstanceStrategy.exact_min(),
        ComponentInstanceStrategy.exact_max(),
    ),
    CompareMethod.ASYMPTOTIC: (
        ComponentInstanceStrategy.exact_max(),
        ComponentInstanceStrategy.exact_max(),
    ),
}


class RelativeChange(str, Enum):
    """Classification of a formula pair.

    The declaration order is the severity order used for sorting:
    ``unchanged < added < removed < changed``.
    """

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"

    @classmethod
    def parse(cls, value: str) -> "RelativeChange":
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown change: {value}") from None

    @classmethod
    def from_values(cls, old: Optional[int], new: Optional[int]) -> "RelativeChange":
        if old is not None and new is not None:
            return cls.CHANGED
        if new is not None:
            return cls.ADDED
        if old is not None:
            return cls.REMOVED
        raise ValueError("Either old or new must be set")

    @property
    def rank(self) -> int:
        return _CHANGE_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other):
        if not isinstance(other, RelativeChange):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RelativeChange):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RelativeChange):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RelativeChange):
            return NotImplemented
        return self.rank >= other.rank


_CHANGE_ORDER: List[RelativeChange] = list(RelativeChange)


@dataclass(frozen=True)
class ComponentRange:
    """Declared benchmark range of one component, inclusive."""

    min: int
    max: int


@dataclass(frozen=True)
class Extrinsic:
    """One weight function as produced by the parser.

    The same type is used before the dimension split (``term`` may contain
    two-dimensional weight literals) and after it (``term`` is one-dimensional).
    """

    pallet: PalletName
    name: ExtrinsicName
    term: "Term"
    component_ranges: Optional[Dict[str, ComponentRange]] = None

    @property
    def key(self) -> Tuple[PalletName, ExtrinsicName]:
        return (self.pallet, self.name)

    def map_term(self, fn: Callable[["Term"], "Term"]) -> "Extrinsic":
        return replace(self, term=fn(self.term))

    def ranges(self) -> Dict[str, ComponentRange]:
        return dict(self.component_ranges or {})


def percent(old: int, new: int) -> Percent:
    """Relative change of ``new`` against ``old`` in percent.

    ``0 -> 0`` is no change; anything growing from zero is infinite.
    """
    if old == 0:
        return 0.0 if new == 0 else math.inf
    return 100.0 * (new / old) - 100.0


def percent_key(p: Percent) -> int:
    """Fixed-point (x1000, truncated) view of a percentage for ordering."""
    if math.isnan(p):
        return 0
    if math.isinf(p):
        return _I128_MAX if p > 0 else _I128_MIN
    return max(_I128_MIN, min(_I128_MAX, int(p * 1000.0)))


_I128_MAX = 2**127 - 1
_I128_MIN = -(2**127)
