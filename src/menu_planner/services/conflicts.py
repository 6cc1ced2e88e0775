"""Conflict detection between combo counterparts and vegetarian picks.

A combo bundles a vegetarian counterpart with its meat or fish dish. If that
counterpart is also picked as a standalone vegetarian day, the same dish would
be served twice in one week. The resolver swaps it out for the next most
voted vegetarian option, widening the candidate pool in fixed tiers:

1. every vegetarian option except the conflicting ones,
2. the tier 1 pool plus the non-conflicting members of the original pick,
3. every vegetarian option, conflicts included.

Tier 3 only exists to terminate when the restaurant listed too few vegetarian
options. Unless ``allow_residual_conflict`` is set, a tier 3 result that still
contains a conflicting id is rejected.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from menu_planner.domain.options import CandidateOption, unique_by_id
from menu_planner.services.catalog import CatalogIndex
from menu_planner.services.selection import rank_by_tally
from menu_planner.services.votes import VEGETARIAN_PICKS

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictReport:
    """Counterpart ids that also appear among the vegetarian picks."""

    conflicting_ids: frozenset[str]

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicting_ids)


def detect_conflicts(
    index: CatalogIndex,
    meat: CandidateOption,
    fish: CandidateOption,
    vegetarian: Sequence[CandidateOption],
) -> ConflictReport:
    """Find combo counterparts that were also picked as vegetarian days."""
    picked = {option.id for option in vegetarian}
    conflicting = set()
    for selected in (meat, fish):
        counterpart = index.vegetarian_counterpart(selected.id)
        if counterpart is not None and counterpart.id in picked:
            conflicting.add(counterpart.id)
    return ConflictReport(conflicting_ids=frozenset(conflicting))


def resolve_conflicts(  # noqa: PLR0913
    index: CatalogIndex,
    vegetarian_pool: Sequence[CandidateOption],
    tally: Mapping[str, int],
    meat: CandidateOption,
    fish: CandidateOption,
    vegetarian: Sequence[CandidateOption],
    *,
    allow_residual_conflict: bool = False,
) -> list[CandidateOption] | None:
    """Return two distinct vegetarian options free of combo conflicts.

    Returns ``None`` when no acceptable pair exists.
    """
    report = detect_conflicts(index, meat, fish, vegetarian)
    picked = list(unique_by_id(vegetarian))
    if not report.has_conflict and len(picked) == VEGETARIAN_PICKS:
        return picked
    if report.has_conflict:
        _logger.info(
            "Vegetarian pick conflicts with combo counterparts: %s",
            sorted(report.conflicting_ids),
        )

    excluded = report.conflicting_ids
    pool = unique_by_id(vegetarian_pool)
    tier_one = [option for option in pool if option.id not in excluded]
    tier_two = [option for option in vegetarian if option.id not in excluded]
    tiers = (
        ("excluding conflicts", tier_one),
        ("with non-conflicting picks", [*tier_two, *tier_one]),
        ("full pool", list(pool)),
    )
    for label, candidates in tiers:
        ranked = list(unique_by_id(rank_by_tally(candidates, tally)))
        if len(ranked) < VEGETARIAN_PICKS:
            continue
        chosen = ranked[:VEGETARIAN_PICKS]
        residual = {option.id for option in chosen} & excluded
        if residual and not allow_residual_conflict:
            _logger.warning(
                "Conflict could not be eliminated: %s", sorted(residual)
            )
            return None
        _logger.info("Vegetarian pair resolved (%s)", label)
        return chosen
    return None
