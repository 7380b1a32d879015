"""JSON formatter for subweight."""

import json
import math
from typing import Any, Dict

from ..diff import ExtrinsicDiff, TotalDiff
from ..models import Dimension
from .base import BaseFormatter


def _entry_to_dict(entry: ExtrinsicDiff, unit: Dimension) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "file": entry.pallet,
        "extrinsic": entry.name,
        "kind": entry.outcome.kind.value,
        "message": entry.outcome.message,
        "unit": unit.value,
    }
    change = entry.term()
    if change is None:
        return data
    data.update(
        {
            "old": change.old_value,
            "new": change.new_value,
            # JSON has no infinity.
            "percent": None if math.isinf(change.percent) else change.percent,
            "classification": change.classification.value,
            "method": change.method.value,
            "scope": change.scope.as_dict(),
            "old_formula": None if change.old is None else str(change.old),
            "new_formula": None if change.new is None else str(change.new),
        }
    )
    return data


class JsonDiffFormatter(BaseFormatter):
    """Render the diff as a JSON list."""

    def render(self, diff: TotalDiff, unit: Dimension) -> None:
        print(self.format(diff, unit))

    def format(self, diff: TotalDiff, unit: Dimension) -> str:
        return json.dumps([_entry_to_dict(e, unit) for e in diff], indent=2)
