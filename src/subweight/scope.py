"""Variable bindings used to evaluate a term."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Dict, Iterator, Optional, Tuple

from .models import Dimension
from .term import READ, WRITE

# Default RocksDb access costs in picoseconds of reference time.
READ_WEIGHT = 25_000_000
WRITE_WEIGHT = 100_000_000


@total_ordering
@dataclass(frozen=True)
class Scope:
    """An immutable, ordered set of ``name -> value`` bindings.

    Scopes order and hash by their full binding content, so corner scopes
    that bind the same values collapse when put into a set.
    """

    bindings: Tuple[Tuple[str, int], ...] = ()

    @classmethod
    def empty(cls) -> "Scope":
        return cls()

    @classmethod
    def from_dict(cls, values: Dict[str, int]) -> "Scope":
        return cls(tuple(sorted(values.items())))

    def with_storage_weights(self, read: int, write: int) -> "Scope":
        return self.put_var(READ, read).put_var(WRITE, write)

    @classmethod
    def for_dimension(cls, dimension: Dimension) -> "Scope":
        """Base scope holding the storage access costs of ``dimension``.

        Storage reads and writes cost reference time but add nothing to the
        proof size, so the proof dimension binds both to zero.
        """
        if dimension is Dimension.TIME:
            return cls.empty().with_storage_weights(READ_WEIGHT, WRITE_WEIGHT)
        return cls.empty().with_storage_weights(0, 0)

    def put_var(self, name: str, value: int) -> "Scope":
        """Return a new scope with ``name`` bound to ``value``."""
        values = dict(self.bindings)
        values[name] = value
        return Scope.from_dict(values)

    def get(self, name: str) -> Optional[int]:
        for key, value in self.bindings:
            if key == name:
                return value
        return None

    def is_empty(self) -> bool:
        return not self.bindings

    def as_dict(self) -> Dict[str, int]:
        return dict(self.bindings)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.bindings)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def __lt__(self, other: "Scope") -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.bindings < other.bindings

    def __str__(self) -> str:
        return ", ".join(f"{name}={value}" for name, value in self.bindings)
