"""Diff engine: compares two sets of weight functions formula by formula.

The algorithm works per ``(pallet, extrinsic)`` identity:
  1. Project both versions onto the requested dimension.
  2. Generate the corner scopes implied by the compare method.
  3. Evaluate both formulas at every corner and keep the most severe result.
  4. Run a sanity check on the formula and attach a warning if it looks off.

A failure to compare one formula never stops the others; it is recorded as a
``failed`` entry instead.
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import CompareParams, FilterParams
from ..exceptions import CompareError, InconclusiveComparisonError, InvalidConfigError
from ..logging_config import get_logger
from ..models import CompareMethod, Dimension, Extrinsic, RelativeChange, percent
from ..scope import Scope
from ..term import READ, WRITE, Scalar, Term
from .models import ExtrinsicDiff, TermChange, TermDiff, TotalDiff
from .ranges import extend_scoped_components

logger = get_logger(__name__)

# More storage accesses than this in a single call is most likely a misparse.
MAX_SANE_ACCESSES = 1000

_ADDED_OR_REMOVED = frozenset({RelativeChange.ADDED, RelativeChange.REMOVED})
_CHANGED_OR_UNCHANGED = frozenset({RelativeChange.CHANGED, RelativeChange.UNCHANGED})


def compare_terms(
    old: Optional[Term],
    new: Optional[Term],
    method: CompareMethod,
    scope: Scope,
) -> TermChange:
    """Evaluate both terms at ``scope`` and classify the change.

    Raises:
        EvalError: If ``scope`` leaves a variable of either term unbound.
    """
    old_value = old.eval(scope) if old is not None else None
    new_value = new.eval(scope) if new is not None else None

    if old == new:
        classification = RelativeChange.UNCHANGED
    else:
        classification = RelativeChange.from_values(old_value, new_value)
    p = percent(old_value or 0, new_value or 0)
    logger.debug("Evaluating %s vs %s (%s) [%s]", old_value, new_value, p, scope)

    return TermChange(
        old=old,
        old_value=old_value,
        new=new,
        new_value=new_value,
        scope=scope,
        percent=p,
        classification=classification,
        method=method,
    )


def _zero_storage_accesses(ext: Optional[Extrinsic]) -> Optional[Extrinsic]:
    if ext is None:
        return None
    return ext.map_term(lambda t: t.substitute(READ, Scalar(0)).substitute(WRITE, Scalar(0)))


def compare_extrinsics(
    old: Optional[Extrinsic],
    new: Optional[Extrinsic],
    params: CompareParams,
) -> TermChange:
    """Compare two versions of one extrinsic and return the representative change.

    Both extrinsics must already be projected onto ``params.unit``.

    Raises:
        CompareError: If the formula pair cannot be compared.
        InconclusiveComparisonError: If the corner results contradict each other.
    """
    present = old if old is not None else new
    if present is None:
        raise ValueError("At least one of old and new must be given")

    scope = Scope.for_dimension(params.unit)
    if params.unit is Dimension.PROOF:
        # Storage accesses do not count towards the proof size.
        old = _zero_storage_accesses(old)
        new = _zero_storage_accesses(new)

    scopes = extend_scoped_components(old, new, params.method, scope)

    results: List[TermChange] = []
    for corner in scopes:
        for ext in (old, new):
            if ext is not None and ext.term.free_vars(corner):
                raise InconclusiveComparisonError(
                    f"Free variable where there should be none: {present.pallet}::"
                    f"{present.name} {sorted(ext.term.free_vars(corner))}"
                )
        results.append(
            compare_terms(
                old.term if old is not None else None,
                new.term if new is not None else None,
                params.method,
                corner,
            )
        )
    logger.debug("%s::%s Evaluated %d scopes", present.pallet, present.name, len(scopes))

    classifications = {r.classification for r in results}
    if classifications <= _ADDED_OR_REMOVED:
        return results[0]
    if classifications <= _CHANGED_OR_UNCHANGED:
        # Of equally severe corners the highest one is reported.
        return max(reversed(results), key=TermChange.sort_key)
    raise InconclusiveComparisonError(
        f"Inconclusive comparison of {present.pallet}::{present.name}: "
        f"{sorted(c.value for c in classifications)}"
    )


def sanity_check_term(term: Term) -> Optional[str]:
    """Return a warning if the term does something implausible, else None.

    Currently only checks that a call does not have more than 1000 reads or
    writes.
    """
    reads = term.find_largest_factor(READ) or 0
    writes = term.find_largest_factor(WRITE) or 0

    if max(reads, writes) > MAX_SANE_ACCESSES:
        if reads > writes:
            return f"Call has {reads} READs"
        return f"Call has {writes} WRITEs"
    return None


def _compile(key: str, pattern: Optional[str]):
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidConfigError(key, pattern, f"invalid regex: {e}")


def _split_dimension(
    exts: Iterable[Extrinsic], unit: Dimension
) -> Dict[Tuple[str, str], Extrinsic]:
    """Project every term onto ``unit``, keyed by identity; the first occurrence wins."""
    by_key: Dict[Tuple[str, str], Extrinsic] = {}
    for ext in exts:
        if ext.key not in by_key:
            by_key[ext.key] = ext.map_term(lambda t: t.simplify(unit))
    return by_key


def compare_files(
    olds: Iterable[Extrinsic],
    news: Iterable[Extrinsic],
    params: CompareParams,
    filter_params: FilterParams,
) -> TotalDiff:
    """Compare every extrinsic present in either the old or the new set.

    The inputs are parsed extrinsics that still carry two-dimensional
    weights; they are projected onto ``params.unit`` here.

    Raises:
        InvalidConfigError: If a name filter is not a valid regex.
        SimplifyError: If a term does not fit the weight cost model.
    """
    ext_regex = _compile("extrinsic", filter_params.extrinsic)
    pallet_regex = _compile("pallet", filter_params.pallet)

    old_by_key = _split_dimension(olds, params.unit)
    new_by_key = _split_dimension(news, params.unit)
    names = sorted(set(old_by_key) | set(new_by_key))
    logger.debug(
        "Comparing %d old against %d new terms", len(old_by_key), len(new_by_key)
    )

    diff: TotalDiff = []
    for pallet, extrinsic in names:
        if pallet_regex is not None and not pallet_regex.search(pallet):
            continue
        if ext_regex is not None and not ext_regex.search(extrinsic):
            continue

        old = old_by_key.get((pallet, extrinsic))
        new = new_by_key.get((pallet, extrinsic))
        logger.debug("Comparing %s::%s", pallet, extrinsic)

        try:
            change = compare_extrinsics(old, new, params)
        except CompareError as e:
            logger.warning("Comparing %s::%s failed: %s", pallet, extrinsic, e.message)
            outcome = TermDiff.failed(e.message)
        else:
            ext = new if new is not None else old
            warning = sanity_check_term(ext.term)
            if warning is not None:
                outcome = TermDiff.warning(change, f"{warning}: {ext.pallet}::{ext.name}")
            else:
                outcome = TermDiff.changed(change)

        diff.append(ExtrinsicDiff(name=extrinsic, pallet=pallet, outcome=outcome))

    return diff
