"""Corner-scope generation for comparing two versions of a formula.

Every free component of a formula pair is resolved to a low and a high
instance value according to the compare method. The cartesian product of
those choices gives the corner scopes at which the formulas are evaluated.
Component ranges may be declared on either side, on both (possibly
differing) or on none; :func:`instance_component` reconciles them.
"""

import itertools
from typing import Dict, List, Optional

from ..exceptions import RangeResolutionError, TooManyComponentsError
from ..logging_config import get_logger
from ..models import (
    CompareMethod,
    ComponentInstanceStrategy,
    ComponentRange,
    Extrinsic,
    MinOrMax,
)
from ..scope import Scope

logger = get_logger(__name__)

MAX_COMPONENTS = 16

# Bounds assumed for a component that no version annotates.
GUESS_MIN = 0
GUESS_MAX = 100

Ranges = Optional[Dict[str, ComponentRange]]


def _pick(r: ComponentRange, min_or_max: MinOrMax) -> int:
    return r.min if min_or_max is MinOrMax.MIN else r.max


def instance_component(
    component: str,
    old_ranges: Ranges,
    new_ranges: Ranges,
    strategy: ComponentInstanceStrategy,
    pallet: str,
    extrinsic: str,
) -> int:
    """Resolve one bound of ``component`` from the ranges of both versions.

    - Only one version declares a range: use it.
    - Both declare the same range: use it.
    - Both declare different ranges: exact strategies fail, guessing ones
      take the union (min of mins, max of maxes).
    - Neither declares a range: exact strategies fail, guessing ones assume
      ``0`` as minimum and ``100`` as maximum.

    Raises:
        RangeResolutionError: If an exact strategy cannot resolve the bound.
    """
    ra = old_ranges.get(component) if old_ranges else None
    rb = new_ranges.get(component) if new_ranges else None

    if ra is not None and rb is None:
        return _pick(ra, strategy.min_or_max)
    if ra is None and rb is not None:
        return _pick(rb, strategy.min_or_max)

    if ra is not None and rb is not None:
        if ra == rb:
            return _pick(ra, strategy.min_or_max)
        if strategy.exact:
            raise RangeResolutionError(
                f"Component {component} of call {pallet}::{extrinsic} has different ranges "
                "in the old and new version - Use Guess instead!",
                component,
            )
        if strategy.min_or_max is MinOrMax.MIN:
            return min(ra.min, rb.min)
        return max(ra.max, rb.max)

    if strategy.exact:
        raise RangeResolutionError(
            f"No range for component {component} of call {pallet}::{extrinsic} "
            "- use Guess instead!",
            component,
        )
    return GUESS_MIN if strategy.min_or_max is MinOrMax.MIN else GUESS_MAX


def extend_scoped_components(
    old: Optional[Extrinsic],
    new: Optional[Extrinsic],
    method: CompareMethod,
    scope: Scope,
) -> List[Scope]:
    """Return the sorted, deduplicated corner scopes for a formula pair.

    Each returned scope extends ``scope`` by a binding for every component
    that is free in either term.

    Raises:
        TooManyComponentsError: If more than 16 components are free.
        RangeResolutionError: If a bound cannot be resolved for ``method``.
    """
    present = old if old is not None else new
    if present is None:
        raise ValueError("At least one of old and new must be given")
    pallet, extrinsic = present.pallet, present.name

    frees = set()
    for ext in (old, new):
        if ext is not None:
            frees |= ext.term.free_vars(scope)
    components = sorted(frees)

    if len(components) > MAX_COMPONENTS:
        raise TooManyComponentsError(pallet, extrinsic, len(components), MAX_COMPONENTS)

    old_ranges = old.ranges() if old is not None else None
    new_ranges = new.ranges() if new is not None else None

    choices = []
    for component in components:
        low = instance_component(
            component, old_ranges, new_ranges, method.min(), pallet, extrinsic
        )
        high = instance_component(
            component, old_ranges, new_ranges, method.max(), pallet, extrinsic
        )
        choices.append((low,) if low == high else (low, high))

    base = scope.as_dict()
    scopes = set()
    for combination in itertools.product(*choices):
        values = dict(base)
        values.update(zip(components, combination))
        scopes.add(Scope.from_dict(values))

    logger.debug(
        "%s::%s: %d components, %d corner scopes", pallet, extrinsic, len(components), len(scopes)
    )
    return sorted(scopes)
